import base64
import binascii
from typing import Tuple


def file_to_data_url(data: bytes, mimetype: str) -> str:
    # Self-contained encoding, the stored item never points at a separate file
    mimetype = mimetype or 'application/octet-stream'
    payload = base64.b64encode(data or b'').decode('ascii')
    return f'data:{mimetype};base64,{payload}'


def parse_data_url(data_url: str) -> Tuple[str, bytes]:
    if not data_url or not data_url.startswith('data:') or ',' not in data_url:
        raise ValueError('not a data URL')
    header, payload = data_url[5:].split(',', 1)
    parts = header.split(';')
    mimetype = parts[0] or 'text/plain'
    if 'base64' not in parts[1:]:
        raise ValueError('only base64 data URLs are supported')
    try:
        return mimetype, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError('data URL payload is not valid base64') from exc
