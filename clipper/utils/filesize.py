SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(num_bytes: int) -> str:
    """Human readable size, e.g. 1536 -> '1.5 KB'"""
    if num_bytes <= 0:
        return "0 Bytes"
    k = 1024
    i = 0
    while i < len(SIZE_UNITS) - 1 and num_bytes >= k ** (i + 1):
        i += 1
    value = f"{num_bytes / k ** i:.2f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[i]}"
