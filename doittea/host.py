"""Host build tool adapter.

Task names missing from the Tea registry are run by the host build tool.
`DoitRunner` runs them as doit tasks, loaded from a namespace of doit task
creators (`task_*` functions), the same way a dodo.py file is loaded.

Example:
    def task_hello():
        return {'actions': ['echo hello']}

    runner = DoitRunner({'task_hello': task_hello})
    runner('hello')  # -> 0
"""

import logging
from types import ModuleType
from typing import Any, Callable, Dict, Optional, Sequence, Union

from doit import doit_cmd
from doit.cmd_base import ModuleTaskLoader


logger = logging.getLogger(__name__)


class DoitRunner:
    """Run named tasks with doit.

    Attributes:
        namespace: Module or dict holding doit task creators
        config: DOIT_CONFIG values applied on top of the namespace's own
    """

    def __init__(self,
                 namespace: Union[ModuleType, Dict[str, Any], None] = None,
                 config: Optional[Dict[str, Any]] = None):
        self.namespace = namespace if namespace is not None else {}
        self.config = dict(config or {})

    def _task_members(self) -> Dict[str, Any]:
        if isinstance(self.namespace, ModuleType):
            members = dict(vars(self.namespace))
        else:
            members = dict(self.namespace)
        if self.config:
            doit_config = dict(members.get('DOIT_CONFIG', {}))
            doit_config.update(self.config)
            members['DOIT_CONFIG'] = doit_config
        return members

    def __call__(self, name: str, args: Optional[Sequence[Any]] = None,
                 callback: Optional[Callable[[int], Any]] = None) -> int:
        """Run doit task `name`, returning doit's exit code.

        `args` are appended to the doit command line after the task name.
        """
        argv = [name] + [str(a) for a in (args or [])]
        logger.info("Running host task: %s", ' '.join(argv))

        loader = ModuleTaskLoader(self._task_members())
        code = doit_cmd.DoitMain(loader).run(argv)
        if code:
            logger.warning("Host task %s exited with code %d", name, code)

        if callback is not None:
            callback(code)
        return code
