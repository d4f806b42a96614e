"""
Mutation module for the quote client.
Coordinates form submissions, cache invalidation and user notifications.
"""

from .collaborators import (
    LoggingNotifier,
    LoggingProgressIndicator,
    NotificationKind,
    Notifier,
    Placement,
    ProgressIndicator,
    progress_indicator,
)
from .controller import (
    MutationController,
    MutationPhase,
    create_quote_controller,
    delete_quote_controller,
    drain,
    update_quote_controller,
)
from .error_messages import ErrorEnvelope, ErrorEnvelopeKind, classify_error, resolve_error_message

__all__ = [
    'LoggingNotifier', 'LoggingProgressIndicator', 'NotificationKind', 'Notifier', 'Placement',
    'ProgressIndicator', 'progress_indicator',
    'MutationController', 'MutationPhase', 'create_quote_controller', 'delete_quote_controller',
    'drain', 'update_quote_controller',
    'ErrorEnvelope', 'ErrorEnvelopeKind', 'classify_error', 'resolve_error_message',
]
