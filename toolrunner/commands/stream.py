"""Canal de sortie d'une exécution en streaming.

ExecStream expose la sortie d'un ToolRunner sous forme d'itérateur
asynchrone d'OutputChunk, accompagné d'une attente du verdict.

Example:
    Lecture de la sortie pendant l'exécution :

        runner = ToolRunner("make").line("-j4 all")
        stream = runner.start(ExecOptions(silent=True))
        async for chunk in stream:
            handle(chunk.stream, chunk.data)
        code = await stream.wait()
"""

import asyncio
from typing import TYPE_CHECKING, Optional, Union

from toolrunner.commands.base import ExecOptions, OutputChunk, OutputStream

if TYPE_CHECKING:
    from toolrunner.commands.runner import ToolRunner

# Marqueur de fin de flux déposé dans la file
_END = object()


def _retrieve_exception(task: asyncio.Task) -> None:
    """Marque l'erreur comme consultée ; wait() la lève toujours."""
    if not task.cancelled():
        task.exception()


class ExecStream:
    """Exécution en cours, vue comme un flux de morceaux étiquetés.

    Les morceaux sont conservés dans une file jusqu'à leur lecture :
    l'appelant doit itérer le flux pour que la mémoire reste bornée.
    L'itération s'arrête à la fin du processus ou au premier échec ;
    wait() retourne alors le code de retour ou lève l'erreur de
    ToolRunner.exec(). Un échec jamais attendu n'est pas signalé par
    la boucle asyncio.
    """

    def __init__(
        self,
        runner: "ToolRunner",
        options: Optional[ExecOptions] = None,
    ) -> None:
        """Lance l'exécution dans une tâche de la boucle courante.

        Args:
            runner: Runner à exécuter.
            options: Options d'exécution.

        Raises:
            RuntimeError: Si aucune boucle asyncio n'est active.
        """
        loop = asyncio.get_running_loop()
        self._runner = runner
        self._queue: "asyncio.Queue[Union[OutputChunk, object]]" = (
            asyncio.Queue()
        )
        self._finished = False
        runner.on(OutputStream.STDOUT, self._on_stdout)
        runner.on(OutputStream.STDERR, self._on_stderr)
        self._task = loop.create_task(self._run(options))
        self._task.add_done_callback(_retrieve_exception)

    def _on_stdout(self, data: bytes) -> None:
        self._queue.put_nowait(OutputChunk(OutputStream.STDOUT, data))

    def _on_stderr(self, data: bytes) -> None:
        self._queue.put_nowait(OutputChunk(OutputStream.STDERR, data))

    async def _run(self, options: Optional[ExecOptions]) -> int:
        try:
            return await self._runner.exec(options)
        finally:
            self._runner.off(OutputStream.STDOUT, self._on_stdout)
            self._runner.off(OutputStream.STDERR, self._on_stderr)
            self._queue.put_nowait(_END)

    def __aiter__(self) -> "ExecStream":
        return self

    async def __anext__(self) -> OutputChunk:
        if self._finished:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END:
            self._finished = True
            raise StopAsyncIteration
        return item

    @property
    def done(self) -> bool:
        """True si le processus est terminé et le verdict connu."""
        return self._task.done()

    async def wait(self) -> int:
        """Attend le verdict de l'exécution.

        Returns:
            Code de retour en cas de succès.

        Raises:
            ToolLaunchError: Si le processus n'a pas pu être lancé.
            ToolExitError: Si le verdict est un échec.
        """
        return await self._task

    def __await__(self):
        return self.wait().__await__()
