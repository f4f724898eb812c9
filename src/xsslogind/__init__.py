# xsslogind.__init__ - core definitions and entry point
# Locks the X screen before the system goes to sleep (via a
# systemd-logind delay lock), and lets applications inhibit the screen
# saver through the org.freedesktop.ScreenSaver D-Bus interface.

import sys

# -----------------------------------------------------------------------------
# Exceptions

# Represents an expected failure mode, which is unlikely to be due to
# a bug in xsslogind.  In this case, we do not need to print an exception
# stack trace; just print the error message and quit.
class UserError(Exception):
	pass

# A bus connection could not be opened, registered, or serviced.
# Always fatal.
class TransportError(UserError):
	pass

# -----------------------------------------------------------------------------
# Import xsslogind modules
# Placed after the declarations above, so that they can be used by the
# imported modules.

import xsslogind.config
import xsslogind.daemon
import xsslogind.logging
from xsslogind.logging import log

# -----------------------------------------------------------------------------
# Entry point

usage_text = '''
Usage: xsslogind [-v | --verbose]

Locks the screen via xscreensaver when the system is about to sleep,
and implements org.freedesktop.ScreenSaver screen saver inhibition.

Options:
  -v, --verbose   Log debugging information.
'''

def main(args=None):
	if args is None:
		args = sys.argv[1:]

	verbose = False
	for arg in args:
		match arg:
			case '-v' | '--verbose':
				verbose = True
			case _:
				sys.stderr.write(usage_text)
				return 2

	xsslogind.logging.setup(verbose)

	try:
		config = xsslogind.config.Config()
		log.debug('Configuration: %s', config)
		daemon = xsslogind.daemon.Daemon(config)
		return daemon.run()

	except UserError as e:
		log.critical('Fatal error: %s', e)
		return 1
