"""Interfaces abstraites et structures de données pour l'exécution
d'outils externes.

Ce module définit :
    - OutputStream / OutputChunk : morceaux de sortie étiquetés.
    - ExecOptions : options d'exécution par appel.
    - ExecResult : résultat immuable de l'exécution bloquante.
    - resolve_options / compute_verdict : logique partagée par les
      deux modes d'exécution.
    - ToolExecutor : interface abstraite des exécuteurs.
"""

import dataclasses
import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import BinaryIO, Dict, Optional

# Code de retour des processus qui n'ont jamais démarré
NOT_STARTED_CODE = -1


class OutputStream(StrEnum):
    """Flux d'origine d'un morceau de sortie."""

    STDOUT = "stdout"
    STDERR = "stderr"


@dataclass(frozen=True)
class OutputChunk:
    """Morceau de sortie reçu d'un sous-processus.

    Attributes:
        stream: Flux d'origine (stdout ou stderr).
        data: Octets bruts reçus.
    """

    stream: OutputStream
    data: bytes


@dataclass(frozen=True)
class ExecOptions:
    """Options d'exécution d'un outil.

    Les valeurs None sont remplacées par resolve_options() au moment
    du lancement.

    Attributes:
        cwd: Répertoire de travail (défaut: répertoire courant).
        env: Environnement complet (défaut: copie de os.environ).
        silent: Désactive l'écho de la commande et le routage de la
            sortie vers les flux console.
        fail_on_stderr: Toute écriture sur stderr rend l'exécution
            en échec, quel que soit le code de retour.
        ignore_return_code: Un code de retour non nul ne provoque
            pas l'échec à lui seul.
        out_stream: Flux binaire recevant stdout (défaut:
            sys.stdout.buffer).
        err_stream: Flux binaire recevant stderr quand fail_on_stderr
            est actif (défaut: sys.stderr.buffer).
        encoding: Encodage de la ligne d'écho et du décodage des
            sorties capturées.
    """

    cwd: Optional[str] = None
    env: Optional[Dict[str, str]] = None
    silent: bool = False
    fail_on_stderr: bool = False
    ignore_return_code: bool = False
    out_stream: Optional[BinaryIO] = None
    err_stream: Optional[BinaryIO] = None
    encoding: str = "utf-8"


def resolve_options(options: Optional[ExecOptions] = None) -> ExecOptions:
    """Complète les options avec les valeurs par défaut du processus.

    Args:
        options: Options fournies par l'appelant ou None.

    Returns:
        Nouvelle instance d'ExecOptions sans valeur None.
    """
    options = options or ExecOptions()
    return dataclasses.replace(
        options,
        cwd=options.cwd or os.getcwd(),
        env=dict(os.environ) if options.env is None else options.env,
        out_stream=options.out_stream or sys.stdout.buffer,
        err_stream=options.err_stream or sys.stderr.buffer,
    )


def compute_verdict(
    return_code: int,
    stderr_written: bool,
    fail_on_stderr: bool = False,
    ignore_return_code: bool = False,
) -> bool:
    """Calcule le verdict d'une exécution.

    Un processus terminé par un signal a un code négatif et échoue
    donc comme tout code non nul.

    Args:
        return_code: Code de retour du processus.
        stderr_written: True si le processus a écrit sur stderr.
        fail_on_stderr: Politique d'échec sur stderr.
        ignore_return_code: Politique d'ignorance du code de retour.

    Returns:
        True si l'exécution est un succès.
    """
    if fail_on_stderr and stderr_written:
        return False
    if return_code != 0 and not ignore_return_code:
        return False
    return True


@dataclass(frozen=True)
class ExecResult:
    """Résultat brut de l'exécution bloquante.

    Aucune politique n'est appliquée : l'appelant décide du verdict,
    éventuellement via verdict().

    Attributes:
        code: Code de retour (-1 si le processus n'a pas démarré,
            négatif si terminé par un signal).
        stdout: Sortie standard capturée.
        stderr: Sortie d'erreur capturée.
        error: ToolLaunchError (cause : OSError de la plateforme) si
            le lancement a échoué.
    """

    code: int
    stdout: str
    stderr: str
    error: Optional[Exception] = None

    def verdict(self, options: Optional[ExecOptions] = None) -> bool:
        """Applique la politique des options à ce résultat.

        Args:
            options: Options portant fail_on_stderr et
                ignore_return_code.

        Returns:
            True si le résultat est un succès selon la politique.
        """
        if self.error is not None:
            return False
        options = options or ExecOptions()
        return compute_verdict(
            self.code,
            bool(self.stderr),
            fail_on_stderr=options.fail_on_stderr,
            ignore_return_code=options.ignore_return_code,
        )


class ToolExecutor(ABC):
    """Interface abstraite pour l'exécution d'un outil."""

    @abstractmethod
    async def exec(self, options: Optional[ExecOptions] = None) -> int:
        """Exécute l'outil en diffusant sa sortie en temps réel.

        Args:
            options: Options d'exécution.

        Returns:
            Code de retour en cas de succès.
        """
        pass

    @abstractmethod
    def exec_sync(self, options: Optional[ExecOptions] = None) -> ExecResult:
        """Exécute l'outil et attend sa fin.

        Args:
            options: Options d'exécution.

        Returns:
            Résultat brut de l'exécution.
        """
        pass
