from urlshortener.dao.memory.helpers import StoredRecord
from urlshortener.dao.memory.mixins import MemoryStoreMixin
from urlshortener.dao.memory.short_url_memory_dao import ShortURLMemoryDAO


__all__ = [
    'StoredRecord',
    'MemoryStoreMixin',
    'ShortURLMemoryDAO',
]
