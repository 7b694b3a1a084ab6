"""Émetteur d'événements minimal.

Utilisé par ToolRunner pour publier les événements "debug", "stdout"
et "stderr" à destination des abonnés externes.
"""

from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

Listener = Callable[[Any], None]


class EventEmitter:
    """Diffuse des événements nommés vers des listeners enregistrés.

    Les listeners sont appelés dans l'ordre d'enregistrement ; une
    exception levée par un listener remonte à l'appelant de emit().
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = (
            defaultdict(list)
        )

    def on(self, event: str, listener: Listener) -> "EventEmitter":
        """Abonne un listener à un événement.

        Args:
            event: Nom de l'événement.
            listener: Callable recevant la charge utile.

        Returns:
            L'instance courante pour le chaînage.
        """
        self._listeners[event].append(listener)
        return self

    def off(self, event: str, listener: Listener) -> "EventEmitter":
        """Désabonne un listener ; sans effet s'il est absent."""
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)
        return self

    def emit(self, event: str, payload: Any) -> bool:
        """Publie un événement.

        Args:
            event: Nom de l'événement.
            payload: Charge utile transmise à chaque listener.

        Returns:
            True si au moins un listener a été appelé.
        """
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            listener(payload)
        return bool(listeners)
