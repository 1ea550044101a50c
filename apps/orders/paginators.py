from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class OrderPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response(
            {
                "count": self.page.paginator.count,
                "total_pages": self.page.paginator.num_pages,
                "page": self.page.number,
                "results": data,
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "required": ["count", "total_pages", "page", "results"],
            "properties": {
                "count": {"type": "integer", "example": 42},
                "total_pages": {"type": "integer", "example": 5},
                "page": {"type": "integer", "example": 1},
                "results": schema,
            },
        }
