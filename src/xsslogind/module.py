# xsslogind.module - core module machinery

import traceback

import xsslogind
from xsslogind.logging import log

# Base class for modules.
class Module:
	# All modules should define their name.
	name = None

	# Names of modules which must be started before this one.
	dependencies = ()

	# Constructor.  Modules receive the daemon (engine) instance, through
	# which they can reach the other modules and shared state.
	def __init__(self, daemon):
		self.daemon = daemon
		self.log = log.getChild('modules.' + self.name)

	# Start function.  If it returns successfully, stop() will also be
	# called exactly once.
	# All resource acquisition and initialization should happen here.
	def start(self):
		pass

	# Stop function.  Called if start() was called.
	def stop(self):
		pass

	def __repr__(self):
		return '<module %s>' % (self.name,)


# Order modules so that every module comes after its dependencies.
def sort_modules(modules):
	by_name = {module.name: module for module in modules}
	result = []
	visiting = set()

	def add(module):
		if module in result:
			return
		if module.name in visiting:
			raise xsslogind.UserError('Dependency cycle involving module %r' % (module.name,))
		visiting.add(module.name)
		for dependency in module.dependencies:
			if dependency not in by_name:
				raise xsslogind.UserError('Module %r depends on missing module %r' % (
					module.name, dependency))
			add(by_name[dependency])
		visiting.remove(module.name)
		result.append(module)

	for module in modules:
		add(module)
	return result


# Start the given modules in dependency order, appending each to
# `running` once its start() has returned.  On failure, the modules
# already started are stopped again before the exception propagates.
def start_modules(modules, running):
	for module in sort_modules(modules):
		log.debug('Starting module: %r', module.name)
		try:
			module.start()
		except BaseException:
			stop_modules(running)
			raise
		running.append(module)
		log.debug('Started module: %r', module.name)


# Stop running modules, in reverse order of starting them.
# It is important that, in case of an error, we revert back to the
# original state insofar as possible.  This means that an error in one
# module should not cause us to not try to stop other modules.
def stop_modules(running):
	errors = []
	while running:
		module = running.pop()
		log.debug('Stopping module %r', module.name)
		try:
			module.stop()
		except Exception:
			log.error('Error when attempting to stop module %r:', module.name)
			traceback.print_exc()
			errors.append(module.name)
			continue
		log.debug('Stopped module %r', module.name)

	if errors:
		raise xsslogind.UserError('Failed to stop some modules: %s' % (', '.join(errors),))
