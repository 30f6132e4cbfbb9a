from fhir_definitions.models.errors import DecodeError, ErrorKind


def io_error(path: str, e: OSError | UnicodeDecodeError) -> DecodeError:
    if isinstance(e, FileNotFoundError):
        return DecodeError(
            kind=ErrorKind.IO,
            code="file_not_found",
            expected="existing file",
            observed="absent",
            message=f"File not found: {path}",
        )
    return DecodeError(
        kind=ErrorKind.IO,
        code="unreadable",
        expected="readable UTF-8 file",
        message=f"Cannot read {path}: {e}",
    )
