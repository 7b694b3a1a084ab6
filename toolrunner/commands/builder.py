"""Constructeur d'arguments pour l'invocation d'un outil.

Ce module fournit la classe ArgumentBuilder qui accumule, dans
l'ordre, les arguments d'une invocation via une API fluent. Les
arguments peuvent provenir d'une liste, d'une valeur littérale ou
d'une ligne de commande à découper (voir tokenizer).

Example:
    Construction des arguments d'un appel à git :

        from toolrunner.commands import ArgumentBuilder

        builder = (
            ArgumentBuilder("git")
            .line('commit -m "first commit"')
            .arg_if(amend, "--amend")
            .path_arg("/srv/my repo/file.txt")
        )
        # builder.args : ["commit", "-m", "first commit",
        #                 "/srv/my repo/file.txt"]
"""

import json
from typing import List, Optional, Sequence, Union

from toolrunner.commands.events import EventEmitter
from toolrunner.commands.tokenizer import split_command_line
from toolrunner.logging.base import Logger
from toolrunner.logging.null_logger import NullLogger

ArgValue = Union[str, Sequence[str], None]


class ArgumentBuilder(EventEmitter):
    """Accumule les arguments d'une invocation d'outil.

    Chaque ajout émet un message de trace portant le chemin de
    l'outil et la valeur ajoutée : vers le Logger injecté sauf si
    quiet est actif, et toujours sous forme d'événement "debug".

    Attributes:
        args: Arguments accumulés, dans l'ordre d'ajout.
        quiet: Supprime l'envoi des traces au Logger.
    """

    def __init__(
        self,
        tool_path: str,
        logger: Optional[Logger] = None,
        quiet: bool = False,
    ) -> None:
        """Initialise le constructeur.

        Args:
            tool_path: Nom ou chemin de l'outil à exécuter.
            logger: Logger recevant les traces (défaut: NullLogger).
            quiet: Si True, aucune trace n'est envoyée au Logger.

        Raises:
            ValueError: Si tool_path est vide.
        """
        super().__init__()
        if not tool_path or not tool_path.strip():
            raise ValueError("Le chemin de l'outil est requis.")
        self._tool_path = tool_path
        self._logger: Logger = logger or NullLogger()
        self.args: List[str] = []
        self.quiet = quiet
        self._debug(f"toolRunner toolPath: {tool_path}")

    @property
    def tool_path(self) -> str:
        """Chemin de l'outil, immuable."""
        return self._tool_path

    @property
    def command_line(self) -> str:
        """Ligne de commande composée (outil puis arguments)."""
        if not self.args:
            return self._tool_path
        return f"{self._tool_path} {' '.join(self.args)}"

    def _debug(self, message: str) -> None:
        if not self.quiet:
            self._logger.log_debug(message)
        self.emit("debug", message)

    def arg(self, value: ArgValue, literal: bool = False) -> "ArgumentBuilder":
        """Ajoute un ou plusieurs arguments.

        Une liste est ajoutée telle quelle. Une chaîne est ajoutée
        comme un seul argument si literal est True, sinon elle est
        découpée en tenant compte des guillemets doubles
        (ex: '"arg one" two -z' donne ['arg one', 'two', '-z']).
        Une valeur vide ou None est ignorée.

        Args:
            value: Ligne de commande ou liste d'arguments.
            literal: Ajoute la chaîne sans découpage.

        Returns:
            L'instance courante pour le chaînage.
        """
        if not value:
            return self

        if isinstance(value, str):
            if literal:
                return self.literal(value)
            return self.line(value)
        return self.args_from(value)

    def args_from(self, tokens: Sequence[str]) -> "ArgumentBuilder":
        """Ajoute une liste d'arguments sans transformation.

        Args:
            tokens: Arguments à ajouter.

        Returns:
            L'instance courante pour le chaînage.
        """
        tokens = list(tokens)
        self._debug(f"{self._tool_path} arg: {json.dumps(tokens)}")
        self.args.extend(tokens)
        return self

    def literal(self, text: str) -> "ArgumentBuilder":
        """Ajoute text comme un argument unique, sans découpage.

        Args:
            text: Valeur à ajouter (ex: chemin contenant des espaces).

        Returns:
            L'instance courante pour le chaînage.
        """
        self._debug(f"{self._tool_path} literal arg: {text}")
        self.args.append(text)
        return self

    def line(
        self, text: Optional[str], literal: bool = False
    ) -> "ArgumentBuilder":
        """Ajoute les arguments d'une ligne de commande.

        Args:
            text: Ligne de commande ; ignorée si vide ou None.
            literal: Ajoute text comme un argument unique.

        Returns:
            L'instance courante pour le chaînage.
        """
        if not text:
            return self
        if literal:
            return self.literal(text)
        self._debug(f"{self._tool_path} arg: {text}")
        self.args.extend(split_command_line(text))
        return self

    def arg_if(
        self,
        condition: object,
        value: ArgValue,
        literal: bool = False,
    ) -> "ArgumentBuilder":
        """Ajoute des arguments seulement si la condition est vraie.

        Voir arg() pour les règles d'ajout.

        Returns:
            L'instance courante pour le chaînage.
        """
        if condition:
            self.arg(value, literal=literal)
        return self

    def path_arg(self, path: str) -> "ArgumentBuilder":
        """Ajoute un chemin comme argument unique.

        Le chemin n'est pas validé ; il ne doit pas contenir de
        guillemets doubles.

        Args:
            path: Chemin à ajouter.

        Returns:
            L'instance courante pour le chaînage.
        """
        self._debug(f"{self._tool_path} pathArg: {path}")
        return self.arg(path, literal=True)
