"""Client package: submits a deck and follows its summary stream."""

from deckdigest.client.cancellation import CancellationToken
from deckdigest.client.consumer import SessionPhase, SessionState, SummaryConsumer

__all__ = ["CancellationToken", "SessionPhase", "SessionState", "SummaryConsumer"]
