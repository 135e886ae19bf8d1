"""User Messages: Vietnamese notification text shown to the catalog user.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - Every CatalogError subclass has exactly one message here
"""

DECODE_FAILED = (
    "Có lỗi xảy ra khi đọc dữ liệu đã lưu. Dữ liệu có thể đã bị hỏng."
)
WRITE_FAILED = (
    "Có lỗi xảy ra khi lưu dữ liệu. Một số thay đổi có thể không được lưu."
)
FILE_READ_FAILED = "Có lỗi xảy ra khi đọc file. Vui lòng thử lại."
IMPORT_SUCCEEDED = "Dữ liệu đã được nhập thành công!"
RECORD_NOT_FOUND = "Không tìm thấy mục {record_id} trong {category}."
INVALID_INPUT = "Dữ liệu nhập không hợp lệ. Vui lòng kiểm tra lại các trường."
UNEXPECTED = "Đã xảy ra lỗi không mong muốn. Vui lòng thử lại."

_IMPORT_FAILED_TEMPLATE = (
    "Có lỗi xảy ra khi nhập dữ liệu. Chi tiết lỗi: {detail}. "
    "Vui lòng kiểm tra file và thử lại."
)


def import_failed(detail: str) -> str:
    """Import failure message carrying the underlying parser message."""
    return _IMPORT_FAILED_TEMPLATE.format(detail=detail)


def record_not_found(category: str, record_id: str) -> str:
    return RECORD_NOT_FOUND.format(category=category, record_id=record_id)
