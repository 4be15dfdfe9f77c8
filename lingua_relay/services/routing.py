"""
Language Router

Decides the source and target language of each message. Evaluated per
message against the room's current bindings; nothing is cached, since the
counterpart may rejoin with a different language mid-conversation.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from lingua_relay.schemas.events import Role, is_outward
from lingua_relay.services.languages import LanguageDirectory
from lingua_relay.services.rooms.bindings import Binding, SessionBindings


@dataclass(frozen=True)
class Route:
    source: str
    target: str

    @property
    def is_passthrough(self) -> bool:
        """Same language on both ends: no translation call is made."""
        return self.source.lower() == self.target.lower()


# Codes that ask for auto-detection; never valid as a translation target
UNDETERMINED = frozenset({"auto", "unknown"})


def definite_language(code: Optional[str]) -> Optional[str]:
    """The code if it names a concrete language, otherwise None."""
    if not code or not code.strip() or code.strip().lower() in UNDETERMINED:
        return None
    return code.strip()


def resolve_target(
    speaker_role: Role,
    peers: Iterable[Binding],
    reply_language: str,
    fallback_language: str,
    explicit_target: Optional[str] = None,
) -> str:
    explicit_target = definite_language(explicit_target)
    if explicit_target:
        return explicit_target
    if is_outward(speaker_role):
        return reply_language
    for peer in peers:
        if is_outward(peer.role):
            return definite_language(peer.language) or fallback_language
    return fallback_language


def resolve_text_source(
    speaker: Binding,
    reply_language: str,
    explicit_language: Optional[str] = None,
) -> str:
    if explicit_language:
        return explicit_language
    if is_outward(speaker.role):
        return speaker.language
    return reply_language


class LanguageRouter:
    def __init__(
        self,
        bindings: SessionBindings,
        directory: LanguageDirectory,
        fallback_language: Optional[str] = None,
    ):
        self.bindings = bindings
        self.directory = directory
        self.fallback_language = fallback_language or directory.default_language

    def _peers(self, connection_id: str, room_id: str) -> Tuple[Binding, ...]:
        return tuple(
            binding
            for peer_id, binding in self.bindings.room_bindings(room_id)
            if peer_id != connection_id
        )

    def target_for(
        self, connection_id: str, speaker: Binding, explicit_target: Optional[str] = None
    ) -> str:
        return resolve_target(
            speaker.role,
            self._peers(connection_id, speaker.room_id),
            self.directory.reply_language,
            self.fallback_language,
            explicit_target,
        )

    def route_audio(
        self, connection_id: str, speaker: Binding, explicit_target: Optional[str] = None
    ) -> Route:
        return Route(
            source=speaker.language,
            target=self.target_for(connection_id, speaker, explicit_target),
        )

    def route_text(
        self,
        connection_id: str,
        speaker: Binding,
        explicit_language: Optional[str] = None,
        explicit_target: Optional[str] = None,
    ) -> Route:
        return Route(
            source=resolve_text_source(speaker, self.directory.reply_language, explicit_language),
            target=self.target_for(connection_id, speaker, explicit_target),
        )
