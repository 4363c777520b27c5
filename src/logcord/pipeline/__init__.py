"""
Event classification and notification pipeline.

gateway event -> classifier -> NotificationDraft -> DeliveryRouter
(ConfigStore lookup, renderer, message sends).
"""
