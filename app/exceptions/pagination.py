def total_pages(total: int, limit: int) -> int:
    return (total // limit) + (1 if total % limit else 0)


def paginate_response(total: int, page: int, limit: int, items: list) -> dict:
    pages = total_pages(total, limit)
    return {
        "success": True,
        "data": items,
        "pagination": {
            "currentPage": page,
            "totalPages": pages,
            "totalBooks": total,
            "hasNext": page < pages,
            "hasPrev": page > 1,
        },
    }
