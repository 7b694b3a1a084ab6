"""Module d'invocation d'outils externes.

Ce module fournit les classes pour construire les arguments d'un
outil, l'exécuter et en déterminer le verdict.

Classes disponibles :
    ArgumentBuilder : Accumulation fluent des arguments.
    ToolRunner : Exécution en streaming (exec) ou bloquante (exec_sync).
    ExecStream : Canal asynchrone de la sortie d'une exécution.
    ExecOptions : Options d'exécution par appel.
    ExecResult : Résultat brut de l'exécution bloquante.
    OutputChunk / OutputStream : Morceaux de sortie étiquetés.
    CommandFormatter : Interface abstraite de formatage de l'écho.
    PlainCommandFormatter : Écho texte brut.
    AnsiCommandFormatter : Écho coloré (console).
    ExecOptionsLoader : Chargement d'ExecOptions depuis un fichier.
"""

from toolrunner.commands.base import (
    ExecOptions,
    ExecResult,
    OutputChunk,
    OutputStream,
    ToolExecutor,
    compute_verdict,
    resolve_options,
)
from toolrunner.commands.builder import ArgumentBuilder
from toolrunner.commands.events import EventEmitter
from toolrunner.commands.formatter import (
    AnsiCommandFormatter,
    CommandFormatter,
    PlainCommandFormatter,
)
from toolrunner.commands.options_loader import ExecOptionsLoader
from toolrunner.commands.runner import ToolRunner
from toolrunner.commands.stream import ExecStream
from toolrunner.commands.tokenizer import split_command_line

__all__ = [
    # Structures de données
    "ExecOptions",
    "ExecResult",
    "OutputChunk",
    "OutputStream",
    # Logique partagée
    "compute_verdict",
    "resolve_options",
    "split_command_line",
    # Interfaces
    "ToolExecutor",
    "EventEmitter",
    # Constructeur et exécuteur
    "ArgumentBuilder",
    "ToolRunner",
    "ExecStream",
    # Formateurs
    "CommandFormatter",
    "PlainCommandFormatter",
    "AnsiCommandFormatter",
    # Configuration
    "ExecOptionsLoader",
]
