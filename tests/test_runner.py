"""Tests pour ToolRunner (exécution en streaming et bloquante)."""

import asyncio
import io
import os
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from toolrunner.commands import (
    AnsiCommandFormatter,
    ExecOptions,
    OutputStream,
    ToolExecutor,
    ToolRunner,
)
from toolrunner.errors import ToolExitError, ToolLaunchError
from toolrunner.logging.base import Logger

PYTHON = sys.executable
MISSING_TOOL = "/nonexistent/toolrunner-missing-tool"

FLAG_COMBINATIONS = [
    (False, False),
    (False, True),
    (True, False),
    (True, True),
]


def python_runner(code: str, logger=None, quiet=False) -> ToolRunner:
    """Crée un runner exécutant du code Python."""
    runner = ToolRunner(PYTHON, logger=logger, quiet=quiet)
    return runner.literal("-c").literal(code)


def options(**kwargs) -> ExecOptions:
    """Crée des options dont les flux sont des BytesIO."""
    kwargs.setdefault("out_stream", io.BytesIO())
    kwargs.setdefault("err_stream", io.BytesIO())
    return ExecOptions(**kwargs)


# --- Tests ToolRunner.exec ---


class TestToolRunnerExec:
    """Tests pour l'exécution en streaming."""

    def setup_method(self):
        """Initialise un logger mock pour chaque test."""
        self.mock_logger = MagicMock(spec=Logger)

    def test_implemente_tool_executor(self):
        """Vérifie que ToolRunner implémente ToolExecutor."""
        assert isinstance(ToolRunner("ls"), ToolExecutor)

    @pytest.mark.asyncio
    async def test_succes_retourne_code(self):
        """Test d'une exécution réussie."""
        ops = options()
        runner = python_runner("import sys; sys.stdout.write('hello')")

        code = await runner.exec(ops)

        assert code == 0
        output = ops.out_stream.getvalue()
        assert output.startswith(b"[command]" + PYTHON.encode())
        assert output.endswith(b"hello")
        assert ops.err_stream.getvalue() == b""

    @pytest.mark.asyncio
    async def test_ligne_echo(self):
        """Test du format exact de la ligne d'écho."""
        ops = options()
        runner = ToolRunner(PYTHON).line("-c pass")

        await runner.exec(ops)

        expected = f"[command]{PYTHON} -c pass{os.linesep}".encode()
        assert ops.out_stream.getvalue() == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fail_on_stderr,ignore_return_code", FLAG_COMBINATIONS
    )
    async def test_code_zero_reussit_pour_toutes_les_options(
        self, fail_on_stderr, ignore_return_code
    ):
        """Test qu'un code 0 sans stderr réussit toujours."""
        runner = python_runner("print('ok')")
        code = await runner.exec(options(
            fail_on_stderr=fail_on_stderr,
            ignore_return_code=ignore_return_code,
        ))
        assert code == 0

    @pytest.mark.asyncio
    async def test_code_non_nul_echoue(self):
        """Test qu'un code 1 lève ToolExitError."""
        runner = python_runner("raise SystemExit(1)")

        with pytest.raises(ToolExitError) as exc_info:
            await runner.exec(options())

        error = exc_info.value
        assert error.return_code == 1
        assert error.tool_path == PYTHON
        assert error.stderr_failure is False
        assert str(error) == f"{PYTHON} failed with return code: 1"

    @pytest.mark.asyncio
    async def test_ignore_return_code(self):
        """Test qu'ignore_return_code retourne le code non nul."""
        runner = python_runner("raise SystemExit(1)")
        code = await runner.exec(options(ignore_return_code=True))
        assert code == 1

    @pytest.mark.asyncio
    async def test_stderr_sans_fail_on_stderr(self):
        """Test que stderr seul réussit et part vers out_stream."""
        ops = options()
        runner = python_runner("import sys; sys.stderr.write('warn')")

        code = await runner.exec(ops)

        assert code == 0
        assert ops.out_stream.getvalue().endswith(b"warn")
        assert ops.err_stream.getvalue() == b""

    @pytest.mark.asyncio
    async def test_stderr_avec_fail_on_stderr(self):
        """Test que stderr fait échouer avec fail_on_stderr."""
        ops = options(fail_on_stderr=True)
        runner = python_runner("import sys; sys.stderr.write('warn')")

        with pytest.raises(ToolExitError) as exc_info:
            await runner.exec(ops)

        assert exc_info.value.return_code == 0
        assert exc_info.value.stderr_failure is True
        assert ops.err_stream.getvalue() == b"warn"
        assert b"warn" not in ops.out_stream.getvalue()

    @pytest.mark.asyncio
    async def test_fail_on_stderr_prioritaire_sur_ignore_return_code(self):
        """Test que fail_on_stderr échoue même avec ignore_return_code."""
        runner = python_runner("import sys; sys.stderr.write('x')")
        with pytest.raises(ToolExitError):
            await runner.exec(options(
                fail_on_stderr=True, ignore_return_code=True,
            ))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fail_on_stderr,ignore_return_code", FLAG_COMBINATIONS
    )
    async def test_echec_lancement(self, fail_on_stderr, ignore_return_code):
        """Test qu'un outil introuvable échoue quelles que soient les
        options."""
        runner = ToolRunner(MISSING_TOOL, logger=self.mock_logger)

        with pytest.raises(ToolLaunchError) as exc_info:
            await runner.exec(options(
                fail_on_stderr=fail_on_stderr,
                ignore_return_code=ignore_return_code,
            ))

        assert str(exc_info.value).startswith(f"{MISSING_TOOL} failed. ")
        assert isinstance(exc_info.value.__cause__, OSError)
        self.mock_logger.log_error.assert_called_once()

    @pytest.mark.asyncio
    async def test_octet_nul_echec_lancement(self):
        """Test qu'un argument contenant un octet nul est un échec de
        lancement."""
        runner = ToolRunner(PYTHON, logger=self.mock_logger)
        runner.literal("a\x00b")

        with pytest.raises(ToolLaunchError) as exc_info:
            await runner.exec(options())

        assert isinstance(exc_info.value.__cause__, ValueError)
        self.mock_logger.log_error.assert_called_once()

    @pytest.mark.asyncio
    async def test_cwd_inexistant_echec_lancement(self, tmp_path):
        """Test qu'un répertoire de travail absent empêche le lancement."""
        runner = python_runner("pass")
        with pytest.raises(ToolLaunchError):
            await runner.exec(options(cwd=str(tmp_path / "absent")))

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="signaux POSIX")
    async def test_termine_par_signal(self):
        """Test qu'un processus tué par un signal échoue."""
        runner = python_runner(
            "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"
        )
        with pytest.raises(ToolExitError) as exc_info:
            await runner.exec(options(ignore_return_code=False))
        assert exc_info.value.return_code < 0

    @pytest.mark.asyncio
    async def test_silent(self):
        """Test que silent supprime l'écho et le routage console."""
        ops = options(silent=True)
        runner = python_runner(
            "import sys; print('out'); sys.stderr.write('err')"
        )

        await runner.exec(ops)

        assert ops.out_stream.getvalue() == b""
        assert ops.err_stream.getvalue() == b""

    @pytest.mark.asyncio
    async def test_evenements_stdout_stderr(self):
        """Test que les morceaux sont publiés même en mode silent."""
        stdout_chunks, stderr_chunks = [], []
        runner = python_runner(
            "import sys; sys.stdout.write('a' * 100000); "
            "sys.stderr.write('e')"
        )
        runner.on(OutputStream.STDOUT, stdout_chunks.append)
        runner.on("stderr", stderr_chunks.append)

        await runner.exec(options(silent=True))

        assert b"".join(stdout_chunks) == b"a" * 100000
        assert b"".join(stderr_chunks) == b"e"

    @pytest.mark.asyncio
    async def test_listener_en_erreur_arrete_l_execution(self):
        """Test qu'un abonné qui lève arrête la lecture et le processus."""
        stderr_chunks = []

        def failing_listener(data):
            raise RuntimeError("listener")

        runner = python_runner(
            "import sys, time; sys.stdout.write('x'); sys.stdout.flush(); "
            "time.sleep(0.5); sys.stderr.write('late')"
        )
        runner.on("stdout", failing_listener)
        runner.on("stderr", stderr_chunks.append)

        with pytest.raises(RuntimeError, match="listener"):
            await runner.exec(options(silent=True))

        pending = [
            task for task in asyncio.all_tasks()
            if task is not asyncio.current_task()
        ]
        assert pending == []
        await asyncio.sleep(0.8)
        assert stderr_chunks == []

    @pytest.mark.asyncio
    async def test_environnement(self):
        """Test de la transmission de l'environnement."""
        ops = options(env={**os.environ, "TR_VALUE": "42"})
        runner = python_runner(
            "import os, sys; sys.stdout.write(os.environ['TR_VALUE'])"
        )

        await runner.exec(ops)

        assert ops.out_stream.getvalue().endswith(b"42")

    @pytest.mark.asyncio
    async def test_repertoire_de_travail(self, tmp_path):
        """Test de la transmission du répertoire de travail."""
        ops = options(cwd=str(tmp_path))
        runner = python_runner(
            "import os, sys; sys.stdout.write(os.getcwd())"
        )

        await runner.exec(ops)

        assert ops.out_stream.getvalue().endswith(
            os.fsencode(os.path.realpath(tmp_path))
        )

    @pytest.mark.asyncio
    async def test_traces_debug(self):
        """Test des traces de lancement et de verdict."""
        runner = python_runner("pass", logger=self.mock_logger)

        await runner.exec(options())

        messages = [
            call.args[0] for call in self.mock_logger.log_debug.call_args_list
        ]
        assert f"exec tool: {PYTHON}" in messages
        assert "Arguments:" in messages
        assert "   -c" in messages
        assert "rc:0" in messages
        assert "success:True" in messages

    @pytest.mark.asyncio
    async def test_quiet_supprime_les_traces(self):
        """Test que quiet n'envoie aucune trace au logger."""
        runner = python_runner("pass", logger=self.mock_logger, quiet=True)
        await runner.exec(options())
        self.mock_logger.log_debug.assert_not_called()

    @pytest.mark.asyncio
    async def test_echec_logue(self):
        """Test que l'échec est envoyé à log_error."""
        runner = python_runner(
            "raise SystemExit(2)", logger=self.mock_logger, quiet=True
        )
        with pytest.raises(ToolExitError):
            await runner.exec(options())
        self.mock_logger.log_error.assert_called_once_with(
            f"{PYTHON} failed with return code: 2"
        )

    @pytest.mark.asyncio
    async def test_args_non_modifies(self):
        """Test que l'exécution ne modifie pas les arguments."""
        runner = python_runner("pass")
        before = list(runner.args)
        await runner.exec(options())
        assert runner.args == before

    @pytest.mark.asyncio
    async def test_formatter_injecte(self):
        """Test de l'utilisation du formateur injecté."""
        formatter = MagicMock(spec=AnsiCommandFormatter)
        formatter.format_command.return_value = ">> custom"
        ops = options()
        runner = ToolRunner(PYTHON, formatter=formatter).line("-c pass")

        await runner.exec(ops)

        formatter.format_command.assert_called_once_with(
            f"{PYTHON} -c pass", ops.out_stream
        )
        assert ops.out_stream.getvalue() == f">> custom{os.linesep}".encode()


# --- Tests ToolRunner.exec_sync ---


class TestToolRunnerExecSync:
    """Tests pour l'exécution bloquante."""

    def test_succes(self):
        """Test d'une exécution bloquante réussie."""
        ops = options()
        runner = python_runner("import sys; sys.stdout.write('hello')")

        result = runner.exec_sync(ops)

        assert result.code == 0
        assert result.stdout == "hello"
        assert result.stderr == ""
        assert result.error is None
        assert ops.out_stream.getvalue().endswith(b"hello")

    def test_code_non_nul_sans_exception(self):
        """Test qu'un code non nul est reporté sans exception."""
        result = python_runner("raise SystemExit(3)").exec_sync(options())
        assert result.code == 3
        assert result.error is None

    def test_stderr_vers_err_stream(self):
        """Test que stderr est écrit sur err_stream après la fin."""
        ops = options()
        runner = python_runner(
            "import sys; print('out'); sys.stderr.write('err')"
        )

        result = runner.exec_sync(ops)

        assert result.stderr == "err"
        assert ops.err_stream.getvalue() == b"err"
        assert b"err" not in ops.out_stream.getvalue()

    def test_aucune_politique_appliquee(self):
        """Test que fail_on_stderr n'influence pas le résultat brut."""
        ops = options(fail_on_stderr=True)
        result = python_runner(
            "import sys; sys.stderr.write('err')"
        ).exec_sync(ops)

        assert result.code == 0
        assert result.error is None
        assert result.verdict(ops) is False

    @pytest.mark.parametrize(
        "fail_on_stderr,ignore_return_code", FLAG_COMBINATIONS
    )
    def test_echec_lancement(self, fail_on_stderr, ignore_return_code):
        """Test qu'un outil introuvable renseigne error."""
        ops = options(
            fail_on_stderr=fail_on_stderr,
            ignore_return_code=ignore_return_code,
        )
        result = ToolRunner(MISSING_TOOL).exec_sync(ops)

        assert isinstance(result.error, ToolLaunchError)
        assert isinstance(result.error.__cause__, OSError)
        assert result.code == -1
        assert result.stdout == ""
        assert result.stderr == ""
        assert result.verdict(ops) is False

    def test_octet_nul_echec_lancement(self):
        """Test qu'un outil contenant un octet nul renseigne error."""
        result = ToolRunner("py\x00thon").exec_sync(options())

        assert isinstance(result.error, ToolLaunchError)
        assert isinstance(result.error.__cause__, ValueError)
        assert result.code == -1

    def test_silent(self):
        """Test que silent n'écrit rien sur les flux."""
        ops = options(silent=True)
        result = python_runner(
            "import sys; print('out'); sys.stderr.write('err')"
        ).exec_sync(ops)

        assert result.stdout.strip() == "out"
        assert ops.out_stream.getvalue() == b""
        assert ops.err_stream.getvalue() == b""

    def test_decodage_remplace_les_octets_invalides(self):
        """Test du décodage tolérant des sorties."""
        result = python_runner(
            "import sys; sys.stdout.buffer.write(b'a\\xffb')"
        ).exec_sync(options(silent=True))
        assert result.stdout == "a\ufffdb"

    @patch("toolrunner.commands.runner.subprocess.run")
    def test_parametres_transmis(self, mock_run, tmp_path):
        """Test des paramètres transmis à subprocess.run."""
        mock_run.return_value = MagicMock(
            returncode=0, stdout=b"", stderr=b"",
        )
        runner = ToolRunner("git").line('commit -m "first commit"')

        runner.exec_sync(options(cwd=str(tmp_path), env={"A": "1"}))

        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == [
            "git", "commit", "-m", "first commit",
        ]
        call_kwargs = mock_run.call_args[1]
        assert call_kwargs["cwd"] == str(tmp_path)
        assert call_kwargs["env"] == {"A": "1"}
        assert call_kwargs["capture_output"] is True

    @patch("toolrunner.commands.runner.subprocess.run")
    def test_permission_refusee(self, mock_run):
        """Test d'un lancement refusé par la plateforme."""
        mock_run.side_effect = PermissionError(13, "Permission denied")
        mock_logger = MagicMock(spec=Logger)

        result = ToolRunner("/bin/x", logger=mock_logger).exec_sync(options())

        assert str(result.error) == "/bin/x failed. Permission denied"
        mock_logger.log_error.assert_called_once()

    @patch("toolrunner.commands.runner.subprocess.run")
    def test_code_signal(self, mock_run):
        """Test qu'un code négatif est reporté tel quel."""
        mock_run.return_value = subprocess.CompletedProcess(
            args=["x"], returncode=-9, stdout=b"", stderr=b"",
        )
        result = ToolRunner("x").exec_sync(options())
        assert result.code == -9
        assert result.error is None
