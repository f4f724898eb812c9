# xsslogind.daemon - Daemon event loop and lifecycle

import importlib
import math
import time

import xsslogind
import xsslogind.actions
import xsslogind.inhibitors
import xsslogind.module
from xsslogind.logging import log

# Combine the wake-up deadlines requested by the connections into a
# single poll timeout, in seconds.  None means "no deadline".
# The result is never larger than `limit`, so that the loop wakes up
# periodically no matter what.
def combine_timeouts(timeouts, limit):
	timeouts = [t for t in timeouts if t is not None]
	if not timeouts:
		return limit
	return max(0, min(min(timeouts), limit))


class EventLoop:
	stopping = False

	def __init__(self, registry, actions, config, clock=time.monotonic):
		self.registry = registry
		self.actions = actions
		self.config = config
		self.clock = clock
		self.log = log.getChild('loop')

		# Time of the last idle timer reset.  The first one happens as
		# soon as something inhibits the screen saver.
		self.last_heartbeat = -math.inf

	def run(self, connections, poller):
		'''Service the connections until stop() is called.
		Raises TransportError if a connection fails.'''
		self.log.debug('Starting event loop.')
		while not self.stopping:
			self.run_once(connections, poller)
		self.log.debug('Event loop exited.')

	def run_once(self, connections, poller):
		for connection in connections:
			self.drain(connection)

		# A stop request may have been dispatched while draining.
		if self.stopping:
			return

		timeout = combine_timeouts(
			(connection.get_timeout() for connection in connections),
			self.config.max_poll_timeout,
		)
		self.log.trace('Waiting for up to %r seconds.', timeout)
		poller.wait(timeout)

		self.heartbeat()

	def drain(self, connection):
		try:
			while connection.process():
				pass
		except xsslogind.TransportError:
			raise
		except Exception as e:
			raise xsslogind.TransportError('Failed to process %s: %s' % (connection, e)) from e

	def heartbeat(self):
		if not self.registry.is_inhibited:
			return
		now = self.clock()
		if now - self.last_heartbeat < self.config.heartbeat_interval:
			return
		self.log.debug('Resetting screen saver idle timer (%d active inhibitors: %s).',
					   self.registry.count, '; '.join(self.registry.describe()))
		self.actions.run('deactivate-screen')
		self.last_heartbeat = now

	def stop(self):
		self.stopping = True


class Daemon:
	'''Owns all daemon state.  Passed explicitly to each module.'''

	# Modules to run, by name.  Loaded from xsslogind.modules.
	module_names = ('glib', 'dbus', 'logind', 'screensaver')

	def __init__(self, config, modules=None):
		self.config = config
		self.actions = xsslogind.actions.ActionInvoker(config.commands)
		self.registry = xsslogind.inhibitors.InhibitorRegistry()
		self.loop = EventLoop(self.registry, self.actions, config)

		if modules is None:
			modules = [load_module(name)(self) for name in self.module_names]
		# Map from module name to Module instance.
		self.modules = {module.name: module for module in modules}

		# Started modules, in the order they were started.
		self.running_modules = []

	def run(self):
		'''Start everything, run the event loop, and shut down.
		Returns the exit status.'''
		try:
			xsslogind.module.start_modules(list(self.modules.values()), self.running_modules)
			log.info('Daemon started.')
			self.loop.run(
				self.modules['dbus'].connections,
				self.modules['glib'].poller,
			)
		finally:
			self.shutdown()
		return 0

	def shutdown(self):
		log.debug('Shutting down.')
		xsslogind.module.stop_modules(self.running_modules)
		log.debug('Shutdown complete.')

	def stop(self, reason=None):
		log.info('Daemon is stopping%s...', ' (%s)' % (reason,) if reason else '')
		self.loop.stop()


# Import xsslogind.modules.<name> and return the Module subclass it defines.
def load_module(module_name):
	python_module_name = 'xsslogind.modules.' + module_name
	log.trace('Loading module %r', python_module_name)
	python_module = importlib.import_module(python_module_name)
	for value in vars(python_module).values():
		if isinstance(value, type) and \
		   issubclass(value, xsslogind.module.Module) and \
		   value.name == module_name:
			return value
	raise xsslogind.UserError('No module class defined with name == %r' % (module_name,))
