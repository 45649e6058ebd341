# api/pagination.py
DEFAULT_PAGE_SIZE = 10


class PageState:
    """
    Pagination state of a list view, read from a Spring page payload:
    {content, totalElements, totalPages, number, size}. Page numbers are
    0-based, exactly as the backend sends them.
    """

    def __init__(self, items, page=0, size=DEFAULT_PAGE_SIZE, total_pages=0, total_elements=0):
        self.items = items
        self.page = page
        self.size = size
        self.total_pages = total_pages
        self.total_elements = total_elements

    @classmethod
    def from_response(cls, data, default_size=DEFAULT_PAGE_SIZE):
        if isinstance(data, list):
            # un-paginated endpoint: treat the whole list as one page
            return cls(
                data,
                page=0,
                size=len(data) or default_size,
                total_pages=1 if data else 0,
                total_elements=len(data),
            )
        data = data or {}

        def pick(key, fallback):
            value = data.get(key)
            return fallback if value is None else value

        return cls(
            pick('content', []),
            page=pick('number', 0),
            size=pick('size', default_size),
            total_pages=pick('totalPages', 0),
            total_elements=pick('totalElements', 0),
        )

    def map(self, func):
        self.items = [func(item) for item in self.items]
        return self

    @property
    def has_previous(self):
        return self.page > 0

    @property
    def has_next(self):
        return self.page + 1 < self.total_pages

    @property
    def previous_page(self):
        return max(self.page - 1, 0)

    @property
    def next_page(self):
        return self.page + 1

    @property
    def page_numbers(self):
        return list(range(self.total_pages))

    @property
    def display_page(self):
        return self.page + 1

    def as_dict(self):
        return {
            'page': self.page,
            'size': self.size,
            'totalPages': self.total_pages,
            'totalElements': self.total_elements,
        }
