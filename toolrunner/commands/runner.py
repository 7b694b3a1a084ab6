"""Exécution d'outils externes.

Ce module fournit ToolRunner, qui combine l'accumulation d'arguments
(ArgumentBuilder) et deux modes d'exécution :

    - exec() : coroutine qui diffuse la sortie en temps réel et
      applique la politique d'échec (fail_on_stderr,
      ignore_return_code) ;
    - exec_sync() : appel bloquant qui capture la sortie complète et
      retourne un résultat brut, sans politique.

Les événements "debug", "stdout" et "stderr" sont publiés sur le
runner pour les abonnés externes (voir EventEmitter).

Example :
    Exécution en streaming :

        from toolrunner.commands import ToolRunner, ExecOptions

        runner = ToolRunner("/usr/bin/git").line("status --short")
        code = await runner.exec(ExecOptions(ignore_return_code=True))

    Exécution bloquante :

        result = ToolRunner("ls").line("-la").exec_sync()
        if result.error is None:
            print(result.stdout)
"""

import asyncio
import contextlib
import os
import subprocess  # nosec B404
from typing import BinaryIO, Callable, Optional

from toolrunner.commands.base import (
    NOT_STARTED_CODE,
    ExecOptions,
    ExecResult,
    ToolExecutor,
    compute_verdict,
    resolve_options,
)
from toolrunner.commands.builder import ArgumentBuilder
from toolrunner.commands.formatter import (
    CommandFormatter,
    PlainCommandFormatter,
)
from toolrunner.commands.stream import ExecStream
from toolrunner.errors.exceptions import ToolExitError, ToolLaunchError
from toolrunner.logging.base import Logger

# Taille maximale d'un morceau lu sur les pipes du sous-processus
CHUNK_SIZE = 64 * 1024


class ToolRunner(ArgumentBuilder, ToolExecutor):
    """Exécuteur d'un outil externe.

    Le Logger injecté remplace tout hook de trace global : par défaut
    (NullLogger) rien n'est écrit. Les échecs sont également envoyés
    à log_error, indépendamment de quiet.

    Attributes:
        args: Arguments accumulés (voir ArgumentBuilder).
        quiet: Supprime l'envoi des traces au Logger.
    """

    def __init__(
        self,
        tool_path: str,
        logger: Optional[Logger] = None,
        quiet: bool = False,
        formatter: Optional[CommandFormatter] = None,
    ) -> None:
        """Initialise le runner.

        Args:
            tool_path: Nom ou chemin de l'outil à exécuter.
            logger: Logger recevant les traces (défaut: NullLogger).
            quiet: Si True, aucune trace n'est envoyée au Logger.
            formatter: Formateur de la ligne d'écho
                (défaut: PlainCommandFormatter).
        """
        super().__init__(tool_path, logger=logger, quiet=quiet)
        self._formatter = formatter or PlainCommandFormatter()

    @staticmethod
    def _write(stream: BinaryIO, data: bytes) -> None:
        stream.write(data)
        if hasattr(stream, "flush"):
            stream.flush()

    def _prepare(self, options: Optional[ExecOptions]) -> ExecOptions:
        """Résout les options, trace les arguments et écrit l'écho.

        Args:
            options: Options fournies par l'appelant.

        Returns:
            Options complètes.
        """
        self._debug(f"exec tool: {self.tool_path}")
        self._debug("Arguments:")
        for arg in self.args:
            self._debug(f"   {arg}")

        ops = resolve_options(options)
        if not ops.silent:
            line = self._formatter.format_command(
                self.command_line, ops.out_stream
            )
            self._write(
                ops.out_stream, (line + os.linesep).encode(ops.encoding)
            )
        return ops

    def _launch_failed(self, error: Exception) -> ToolLaunchError:
        reason = getattr(error, "strerror", None) or str(error)
        self._logger.log_error(
            f"Impossible de lancer {self.tool_path} : {reason}"
        )
        return ToolLaunchError(self.tool_path, reason)

    @staticmethod
    async def _pump(
        reader: asyncio.StreamReader,
        handler: Callable[[bytes], None],
    ) -> None:
        """Transmet chaque morceau lu sur reader au handler."""
        while True:
            chunk = await reader.read(CHUNK_SIZE)
            if not chunk:
                break
            handler(chunk)

    async def exec(self, options: Optional[ExecOptions] = None) -> int:
        """Exécute l'outil en diffusant sa sortie en temps réel.

        Chaque morceau de stdout est publié ("stdout") puis écrit sur
        out_stream. Chaque morceau de stderr est publié ("stderr") puis
        écrit sur err_stream si fail_on_stderr est actif, sur
        out_stream sinon. Aucune sortie n'est accumulée.

        Si un abonné ou une écriture lève une exception, la lecture
        s'arrête, le processus est tué et attendu, puis l'exception
        est propagée telle quelle.

        Args:
            options: Options d'exécution (défauts du processus courant).

        Returns:
            Code de retour du processus si le verdict est un succès.

        Raises:
            ToolLaunchError: Si le processus n'a pas pu être lancé.
            ToolExitError: Si le code de retour est non nul (hors
                ignore_return_code) ou si stderr a été écrit avec
                fail_on_stderr.
        """
        ops = self._prepare(options)
        args = list(self.args)

        try:
            proc = await asyncio.create_subprocess_exec(
                self.tool_path,
                *args,
                cwd=ops.cwd,
                env=ops.env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            raise self._launch_failed(e) from e

        stderr_written = False

        def on_stdout(data: bytes) -> None:
            self.emit("stdout", data)
            if not ops.silent:
                self._write(ops.out_stream, data)

        def on_stderr(data: bytes) -> None:
            nonlocal stderr_written
            self.emit("stderr", data)
            stderr_written = True
            if not ops.silent:
                target = (
                    ops.err_stream if ops.fail_on_stderr
                    else ops.out_stream
                )
                self._write(target, data)

        pumps = [
            asyncio.create_task(self._pump(proc.stdout, on_stdout)),
            asyncio.create_task(self._pump(proc.stderr, on_stderr)),
        ]
        try:
            await asyncio.gather(*pumps)
            code = await proc.wait()
        except BaseException:
            # Plus aucun lecteur : le processus est tué puis attendu
            for task in pumps:
                task.cancel()
            await asyncio.gather(*pumps, return_exceptions=True)
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
            await proc.wait()
            raise
        self._debug(f"rc:{code}")

        success = compute_verdict(
            code,
            stderr_written,
            fail_on_stderr=ops.fail_on_stderr,
            ignore_return_code=ops.ignore_return_code,
        )
        self._debug(f"success:{success}")
        if success:
            return code

        error = ToolExitError(
            self.tool_path,
            code,
            stderr_failure=ops.fail_on_stderr and stderr_written,
        )
        self._logger.log_error(str(error))
        raise error

    def start(self, options: Optional[ExecOptions] = None) -> ExecStream:
        """Lance exec() en tâche de fond et retourne son canal de sortie.

        Doit être appelé depuis une boucle asyncio active. Un runner ne
        doit porter qu'une exécution à la fois.

        Args:
            options: Options d'exécution.

        Returns:
            ExecStream itérable et attendable.
        """
        return ExecStream(self, options)

    def exec_sync(self, options: Optional[ExecOptions] = None) -> ExecResult:
        """Exécute l'outil et attend sa fin.

        La sortie n'est pas diffusée en temps réel : stdout et stderr
        sont écrits sur out_stream et err_stream (hors mode silent)
        une fois le processus terminé. Adapté aux outils courts.

        Aucune politique n'est appliquée : un code non nul est
        simplement reporté dans le résultat. Utiliser
        ExecResult.verdict() pour appliquer fail_on_stderr et
        ignore_return_code.

        Args:
            options: Options d'exécution (défauts du processus courant).

        Returns:
            ExecResult avec les sorties décodées ; error est renseigné
            si le processus n'a pas pu être lancé.
        """
        ops = self._prepare(options)

        try:
            proc = subprocess.run(  # nosec B603
                [self.tool_path, *self.args],
                capture_output=True,
                cwd=ops.cwd,
                env=ops.env,
            )
        except (OSError, ValueError) as e:
            error = self._launch_failed(e)
            error.__cause__ = e
            return ExecResult(
                code=NOT_STARTED_CODE, stdout="", stderr="", error=error
            )

        if not ops.silent:
            if proc.stdout:
                self._write(ops.out_stream, proc.stdout)
            if proc.stderr:
                self._write(ops.err_stream, proc.stderr)

        self._debug(f"rc:{proc.returncode}")
        return ExecResult(
            code=proc.returncode,
            stdout=proc.stdout.decode(ops.encoding, errors="replace"),
            stderr=proc.stderr.decode(ops.encoding, errors="replace"),
        )
