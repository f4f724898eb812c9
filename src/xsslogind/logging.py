# xsslogind.logging - logging implementation

import logging
import os

# Define a few severity levels specific to xsslogind
TRACE = logging.DEBUG - 5
SECURITY = logging.ERROR - 5

logging.addLevelName(TRACE, 'TRACE')
logging.addLevelName(SECURITY, 'SECURITY')

# Define a class which implements the severity levels as methods
class Logger(logging.getLoggerClass()):
	def trace(self, *args, **kwargs):
		self.log(TRACE, *args, **kwargs)

	def security(self, *args, **kwargs):
		self.log(SECURITY, *args, **kwargs)

logging.setLoggerClass(Logger)

# Levels in increasing verbosity.  Index 4 (INFO) is the default.
LEVELS = [
	logging.CRITICAL,
	logging.ERROR,
	SECURITY,
	logging.WARNING,
	logging.INFO,
	logging.DEBUG,
	TRACE,
]

def get_level(verbosity):
	index = 4 + verbosity
	return LEVELS[max(0, min(index, len(LEVELS) - 1))]

def setup(verbose=False):
	'''Configure the root handler.  Called once, from main().'''
	verbosity = int(os.getenv('XSSLOGIND_VERBOSE', '0'))
	if verbose:
		verbosity = max(verbosity, 1)
	logging.basicConfig(
		format=os.getenv('XSSLOGIND_LOG_FORMAT', '%(name)s: %(message)s'),
		level=get_level(verbosity),
	)
	log.setLevel(get_level(verbosity))

log = logging.getLogger('xsslogind')
