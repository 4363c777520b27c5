from logcord.settings.repositories.log_channels_repo import LogChannelsRepository

__all__ = ["LogChannelsRepository"]
