from .storage_port import KeyValueStorage, InMemoryStorage, SQLAlchemyStorage
from .observer import Toast, ToastSubject, ToastCollector, ToastLogger
from .chain_of_responsibility import UploadCandidate, build_note_chain, build_image_chain, build_pdf_chain

__all__ = [
    'KeyValueStorage', 'InMemoryStorage', 'SQLAlchemyStorage',
    'Toast', 'ToastSubject', 'ToastCollector', 'ToastLogger',
    'UploadCandidate', 'build_note_chain', 'build_image_chain', 'build_pdf_chain'
]
