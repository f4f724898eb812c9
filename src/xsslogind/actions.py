# xsslogind.actions - external screen saver / display commands
# Each action is a blocking, fire-and-forget program invocation.  The
# exit status is only used for logging; failures are never retried.

import shlex
import subprocess

from xsslogind.logging import log

class ActionInvoker:
	def __init__(self, commands):
		# Map from symbolic action name to argv list.
		self.commands = commands
		self.log = log.getChild('actions')

	def run(self, name):
		'''Run the named action.  Returns True if it exited successfully.'''
		argv = self.commands[name]
		self.log.debug('Running %s: %s', name, shlex.join(argv))
		try:
			result = subprocess.run(argv, stdin=subprocess.DEVNULL, check=False)
		except OSError as e:
			self.log.error('Failed to run %s (%s): %s', argv[0], name, e)
			return False

		if result.returncode != 0:
			self.log.error('%s (%s) failed with exit status %d', argv[0], name, result.returncode)
			return False
		return True
