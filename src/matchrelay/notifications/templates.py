"""Localized notification templates.

Format: language -> template key -> (title, body). Bodies are
:meth:`str.format` strings over :meth:`MatchEvent.template_args`.
A finished match without a winner uses the ``match_draw`` key.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from matchrelay._constants import DEFAULT_LANGUAGE
from matchrelay.state.events import MatchEvent, NotificationKind

_logger = logging.getLogger(__name__)

DRAW_KEY = "match_draw"

DEFAULT_TEMPLATES: dict[str, dict[str, tuple[str, str]]] = {
    "en": {
        NotificationKind.MATCH_STARTING: ("🔴 LIVE NOW", "{team1} vs {team2} is starting!"),
        NotificationKind.SCORE_UPDATE: ("📊 SCORE UPDATE", "{team1} {score1}-{score2} {team2}"),
        NotificationKind.MATCH_FINISHED: ("✅ MATCH FINISHED", "{winner} defeated {loser} ({score1}-{score2})"),
        DRAW_KEY: ("✅ MATCH FINISHED", "{team1} and {team2} drew ({score1}-{score2})"),
        NotificationKind.MATCH_REMINDER: ("⏰ STARTING SOON", "{team1} vs {team2} starts in {minutes} min"),
    },
    "es": {
        NotificationKind.MATCH_STARTING: ("🔴 EN VIVO", "¡{team1} vs {team2} está comenzando!"),
        NotificationKind.SCORE_UPDATE: ("📊 MARCADOR", "{team1} {score1}-{score2} {team2}"),
        NotificationKind.MATCH_FINISHED: ("✅ PARTIDA TERMINADA", "{winner} venció a {loser} ({score1}-{score2})"),
        DRAW_KEY: ("✅ PARTIDA TERMINADA", "{team1} y {team2} empataron ({score1}-{score2})"),
        NotificationKind.MATCH_REMINDER: ("⏰ EMPIEZA PRONTO", "{team1} vs {team2} empieza en {minutes} min"),
    },
    "pt": {
        NotificationKind.MATCH_STARTING: ("🔴 AO VIVO", "{team1} vs {team2} está começando!"),
        NotificationKind.SCORE_UPDATE: ("📊 PLACAR", "{team1} {score1}-{score2} {team2}"),
        NotificationKind.MATCH_FINISHED: ("✅ PARTIDA ENCERRADA", "{winner} venceu {loser} ({score1}-{score2})"),
        DRAW_KEY: ("✅ PARTIDA ENCERRADA", "{team1} e {team2} empataram ({score1}-{score2})"),
        NotificationKind.MATCH_REMINDER: ("⏰ COMEÇA EM BREVE", "{team1} vs {team2} começa em {minutes} min"),
    },
    "fr": {
        NotificationKind.MATCH_STARTING: ("🔴 EN DIRECT", "{team1} vs {team2} commence !"),
        NotificationKind.SCORE_UPDATE: ("📊 SCORE", "{team1} {score1}-{score2} {team2}"),
        NotificationKind.MATCH_FINISHED: ("✅ MATCH TERMINÉ", "{winner} a battu {loser} ({score1}-{score2})"),
        DRAW_KEY: ("✅ MATCH TERMINÉ", "{team1} et {team2} à égalité ({score1}-{score2})"),
        NotificationKind.MATCH_REMINDER: ("⏰ BIENTÔT", "{team1} vs {team2} commence dans {minutes} min"),
    },
}


def template_key(event: MatchEvent) -> str:
    return DRAW_KEY if event.is_draw else event.kind.value


class TemplateCatalog:
    """Resolves and renders templates with a language fallback chain.

    Chain: exact language (``pt-br``), primary subtag (``pt``), default language.
    """

    def __init__(
        self,
        templates: Mapping[str, Mapping[str, tuple[str, str]]] | None = None,
        *,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        source = DEFAULT_TEMPLATES if templates is None else templates
        self._templates = {
            language.lower(): {str(key): value for key, value in entries.items()}
            for language, entries in source.items()
        }
        self._default_language = default_language
        if default_language not in self._templates:
            raise ValueError(f"default language {default_language!r} has no templates")

    @property
    def languages(self) -> list[str]:
        return sorted(self._templates)

    def resolve_language(self, language: str, key: str) -> str:
        """First language in the fallback chain that defines *key*."""
        candidates = [language.lower(), language.lower().split("-", 1)[0], self._default_language]
        for candidate in candidates:
            if key in self._templates.get(candidate, {}):
                return candidate
        return self._default_language

    def render(self, event: MatchEvent, language: str) -> tuple[str, str]:
        """Title and body of *event* for a subscriber speaking *language*."""
        key = template_key(event)
        resolved = self.resolve_language(language, key)
        title, body = self._templates[resolved].get(key) or self._templates[self._default_language][key]
        if resolved != language.lower():
            _logger.debug("No %s template for %s; using %s", key, language, resolved)
        return title.format(**event.template_args()), body.format(**event.template_args())
