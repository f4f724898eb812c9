# xsslogind.config - runtime settings
# There is no configuration file; everything tunable comes from the
# environment, and the protocol constants are fixed.

import os
import shlex

import xsslogind

# How often (in seconds) to reset the screen saver's idle timer while
# something is inhibiting it.  xscreensaver's minimum timeout is one
# minute, so this must stay below that.
HEARTBEAT_INTERVAL = 50

# Upper bound on a single wait of the event loop, so that the
# heartbeat gets a chance to run even when both buses are quiet.
MAX_POLL_TIMEOUT = 50

# After a successful lock, how long to wait before letting the system
# go to sleep, so that the locker has a chance to cover the screen.
LOCK_SETTLE_TIME = 1

# Symbolic action names, mapped to their environment override and
# default command line.
ACTIONS = {
	'lock-screen':       ('XSSLOGIND_LOCK_COMMAND',       'xscreensaver-command -lock'),
	'deactivate-screen': ('XSSLOGIND_DEACTIVATE_COMMAND', 'xscreensaver-command -deactivate'),
	'force-display-on':  ('XSSLOGIND_DISPLAY_ON_COMMAND', 'xset dpms force on'),
}

class Config:
	def __init__(self, environ=None):
		if environ is None:
			environ = os.environ

		self.heartbeat_interval = HEARTBEAT_INTERVAL
		self.max_poll_timeout = MAX_POLL_TIMEOUT
		self.lock_settle_time = LOCK_SETTLE_TIME

		# Map from action name to argv list.
		self.commands = {}
		for name, (variable, default) in ACTIONS.items():
			command = shlex.split(environ.get(variable, default))
			if not command:
				raise xsslogind.UserError('%s must not be empty' % (variable,))
			self.commands[name] = command

	def __str__(self):
		return ', '.join('%s: %s' % (name, shlex.join(argv))
						 for name, argv in self.commands.items())
