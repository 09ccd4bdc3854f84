from urlshortener.models.url_record_model import ClickMetadata, ClickEventModel, URLRecordModel, URLStatsModel


__all__ = [
    'ClickMetadata',
    'ClickEventModel',
    'URLRecordModel',
    'URLStatsModel',
]
