"""Formateurs de la ligne d'écho des commandes.

Avant chaque lancement (hors mode silent), ToolRunner écrit sur le
flux de sortie la commande composée, précédée du marqueur [command].

Classes :
    CommandFormatter : Interface abstraite de formatage.
    PlainCommandFormatter : Texte brut, format par défaut.
    AnsiCommandFormatter : Marqueur coloré quand le flux est un TTY.

Example :
    Sortie d'un appel à git :

        [command]git commit -m first commit
"""

from abc import ABC, abstractmethod
from typing import IO, Optional

COMMAND_MARKER = "[command]"


class CommandFormatter(ABC):
    """Interface abstraite pour formater la ligne d'écho."""

    @abstractmethod
    def format_command(
        self, command_line: str, stream: Optional[IO] = None
    ) -> str:
        """Formate la ligne d'écho, sans fin de ligne.

        Args:
            command_line: Outil suivi de ses arguments.
            stream: Flux de destination, pour les formateurs qui
                adaptent leur sortie au terminal.

        Returns:
            Ligne formatée prête à l'écriture.
        """
        pass


class PlainCommandFormatter(CommandFormatter):
    """Formateur texte brut : marqueur puis commande, sans espace."""

    def format_command(
        self, command_line: str, stream: Optional[IO] = None
    ) -> str:
        return f"{COMMAND_MARKER}{command_line}"


class AnsiCommandFormatter(CommandFormatter):
    """Formateur ANSI coloré pour la sortie console.

    Colore le marqueur [command] en cyan gras ; la commande reste
    brute. N'émet aucun code ANSI si le flux de destination n'est
    pas un terminal TTY, évitant ainsi de polluer les pipes ou les
    redirections.
    """

    RESET = "\033[0m"
    MARKER_STYLE = "\033[1;36m"   # Cyan gras

    @staticmethod
    def _is_tty(stream: Optional[IO]) -> bool:
        return (
            stream is not None
            and hasattr(stream, "isatty")
            and stream.isatty()
        )

    def format_command(
        self, command_line: str, stream: Optional[IO] = None
    ) -> str:
        if not self._is_tty(stream):
            return f"{COMMAND_MARKER}{command_line}"
        return (
            f"{self.MARKER_STYLE}{COMMAND_MARKER}{self.RESET}"
            f"{command_line}"
        )
