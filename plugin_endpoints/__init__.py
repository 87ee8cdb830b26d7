"""REST endpoints exposing installed plugin metadata and packages"""
__version__ = "0.1.0"
