import re
import unicodedata

# Characters stripped from generated download file names
SPECIAL_FILENAME_CHARS = set('?[]/\\=<>:;,\'"&$#*()|~`!{}%+’«»”“\x00')

MAX_FILENAME_LENGTH = 255


def remove_accents(value: str) -> str:
    """Fold accented characters to their closest ASCII form"""
    normalized = unicodedata.normalize('NFKD', value)
    return ''.join(ch for ch in normalized if not unicodedata.combining(ch))


def sanitize_title(title: str) -> str:
    """
    Turn a display name into a URL-safe slug.

    Accents are folded, markup and entities are dropped, everything is
    lowercased and any run of characters outside ``[a-z0-9_]`` becomes a
    single dash. The result is stable: the same name always yields the
    same slug.

    Args:
        title: Display name, e.g. ``"Hello Dolly"``

    Returns:
        Slug, e.g. ``"hello-dolly"``
    """
    slug = remove_accents(title or '')
    slug = re.sub(r'<[^>]*>', '', slug)
    slug = re.sub(r'&[^;\s]+;', '', slug)
    slug = slug.lower().replace('.', '-')
    slug = re.sub(r'[^a-z0-9 _-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def sanitize_file_name(filename: str) -> str:
    """
    Make a file name safe for a Content-Disposition header and the filesystem

    Args:
        filename: Original name, e.g. ``"Hello Dolly 1.7.2"``

    Returns:
        Sanitized name, e.g. ``"Hello-Dolly-1.7.2"``
    """
    filename = (filename or '').replace('%20', '-')
    filename = ''.join(ch for ch in filename if ch not in SPECIAL_FILENAME_CHARS)
    filename = re.sub(r'[\r\n\t -]+', '-', filename)
    filename = filename.strip('.-_')

    if len(filename) > MAX_FILENAME_LENGTH:
        filename = filename[:MAX_FILENAME_LENGTH]

    return filename
