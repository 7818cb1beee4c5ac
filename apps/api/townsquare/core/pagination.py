from townsquare.core.config import settings


def page_window(page: int, page_size: int | None = None) -> tuple[int, int]:
    """Translate a 1-based page number into an ``(offset, limit)`` pair.

    Pages below 1 are clamped to the first page.
    """
    size = page_size or settings.feed_page_size
    page_number = max(page, 1)
    return (page_number - 1) * size, size
