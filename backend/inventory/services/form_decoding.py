"""Form Decoding — turns a parsed multipart/urlencoded body into raw pipeline values.

Invariants:
    - Output is a flat dict: field name -> str | UploadedFile | list of those
    - Repeated keys keep submission order; single keys are unwrapped
    - File parts are read fully into memory (bounded by the upload ceiling check
      in core, and by the server's request size limit)
    - echo_values() never includes file content — only text for redisplay

Design Decisions:
    - Starlette's FormData/UploadFile stay in the shell; core only sees UploadedFile
"""

from starlette.datastructures import FormData, UploadFile

from inventory.core.field_rules import RawValue, UploadedFile


async def _to_uploaded_file(upload: UploadFile) -> UploadedFile:
    content = await upload.read()
    await upload.close()
    return UploadedFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )


async def decode_form(form: FormData) -> dict[str, RawValue]:
    """Decode form data into the flat mapping the field validator consumes."""
    collected: dict[str, list[str | UploadedFile]] = {}
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            decoded: str | UploadedFile = await _to_uploaded_file(value)
        else:
            decoded = value
        collected.setdefault(key, []).append(decoded)
    return {
        key: values[0] if len(values) == 1 else values
        for key, values in collected.items()
    }


def echo_values(raw_values: dict[str, RawValue]) -> dict[str, str | list[str]]:
    """Text values to send back so the form redisplays with prior input intact."""
    echoed: dict[str, str | list[str]] = {}
    for key, value in raw_values.items():
        if isinstance(value, list):
            texts = [v for v in value if isinstance(v, str)]
            if texts:
                echoed[key] = texts
        elif isinstance(value, str):
            echoed[key] = value
    return echoed
