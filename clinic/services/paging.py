from django.conf import settings


def paginate(qs, page=1, page_size=None):
    """Slice ``qs`` for a 1-based page; returns ``(items, total)``."""
    page = max(1, int(page or 1))
    page_size = min(settings.API_MAX_PAGE_SIZE, max(1, int(page_size or settings.API_PAGE_SIZE)))
    total = qs.count()
    start = (page - 1) * page_size
    return list(qs[start:start + page_size]), total
