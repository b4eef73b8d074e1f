"""Page arithmetic for commit history.

Branch history and path history compute the next page differently: path
history looks one page further ahead, so its last full page reports no
successor one page earlier than branch history does.
"""


def normalize_page(page: int) -> int:
    """Coerce page numbers below 1 to 1. There is no upper clamp."""
    return max(page, 1)


def page_offset(page: int, page_size: int) -> int:
    """Number of commits to skip to reach page."""
    return (page - 1) * page_size


def previous_page(page: int) -> int:
    """Previous page number, 0 on the first page."""
    return max(page - 1, 0)


def next_page(page: int, page_size: int, total: int) -> int:
    """Next page number for branch history, 0 when there is none.

    Examples:
        >>> next_page(1, 50, 50)
        2
        >>> next_page(2, 50, 50)
        0
    """
    return 0 if page * page_size > total else page + 1


def next_page_lookahead(page: int, page_size: int, total: int) -> int:
    """Next page number for path history, 0 when there is none.

    Examples:
        >>> next_page_lookahead(1, 50, 50)
        0
        >>> next_page_lookahead(1, 50, 100)
        2
    """
    return 0 if (page + 1) * page_size > total else page + 1
