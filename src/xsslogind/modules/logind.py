# xsslogind.modules.logind - systemd-logind integration
# Holds a "delay" inhibitor lock on sleep, so that we get the chance to
# lock the screen before the system goes to sleep.  See "Taking Delay
# Locks" in https://systemd.io/INHIBITOR_LOCKS/

import os
import time

import xsslogind.module

LOGIND_SERVICE = 'org.freedesktop.login1'
LOGIND_PATH = '/org/freedesktop/login1'
LOGIND_MANAGER = 'org.freedesktop.login1.Manager'

class SleepLock:
	'''The logind sleep delay lock.  At most one is held at a time.'''

	# Inhibit() arguments.
	what = 'sleep'
	who = 'xscreensaver'
	why = 'lock screen on suspend'
	mode = 'delay'

	def __init__(self, bus, log):
		self.bus = bus
		self.log = log

		# File descriptor of the held lock, or None.
		self.fd = None

	@property
	def held(self):
		return self.fd is not None

	def acquire(self):
		'''Take a new lock.  Returns False (after logging) on failure.'''
		try:
			obj = self.bus.get_object(
				bus_name=LOGIND_SERVICE,
				object_path=LOGIND_PATH,
			)
			unix_fd = obj.Inhibit(
				self.what,
				self.who,
				self.why,
				self.mode,
				dbus_interface=LOGIND_MANAGER,
			)
			fd = unix_fd.take()
		except Exception as e:
			self.log.error('Failed to take the sleep delay lock: %s', e)
			return False

		if not isinstance(fd, int) or fd < 0:
			self.log.error('Inhibit() returned no usable lock handle: %r', fd)
			return False

		if self.fd is not None:
			self.log.warning('Already holding a sleep delay lock (fd %d)? Replacing it.', self.fd)
			self.close()
		self.fd = fd
		self.log.debug('Took sleep delay lock (fd %d).', fd)
		return True

	def release(self):
		'''Release the held lock, letting the system go to sleep.'''
		if self.fd is None:
			self.log.warning('System is going to sleep but we are not holding a delay lock?')
			return False
		self.log.debug('Releasing sleep delay lock (fd %d).', self.fd)
		self.close()
		return True

	def close(self):
		fd = self.fd
		self.fd = None
		try:
			os.close(fd)
		except OSError as e:
			self.log.warning('Error closing lock fd %d: %s', fd, e)


class LogindModule(xsslogind.module.Module):
	name = 'logind'

	dependencies = ('dbus',)

	def __init__(self, daemon):
		super().__init__(daemon)
		self.bus = None
		self.sleep_lock = None

	def start(self):
		self.bus = self.daemon.modules['dbus'].system_bus
		self.sleep_lock = SleepLock(self.bus, self.log)
		self.bus.add_signal_receiver(
			self.handle_sleep_signal,
			signal_name='PrepareForSleep',
			dbus_interface=LOGIND_MANAGER,
			path=LOGIND_PATH,
			message_keyword='message',
		)
		if not self.sleep_lock.acquire():
			self.log.warning('Continuing without a delay lock; the screen may not be locked before sleep.')

	def stop(self):
		self.bus.remove_signal_receiver(
			self.handle_sleep_signal,
			signal_name='PrepareForSleep',
			dbus_interface=LOGIND_MANAGER,
			path=LOGIND_PATH,
		)
		if self.sleep_lock.held:
			self.sleep_lock.release()
		self.bus = None

	# PrepareForSleep(b start)
	def handle_sleep_signal(self, *args, message=None):
		if (message is not None and message.get_signature() != 'b') or \
		   len(args) != 1 or not isinstance(args[0], int):
			self.log.warning('Ignoring malformed PrepareForSleep signal: %r', args)
			return

		self.log.debug('System is %s sleep', 'entering' if args[0] else 'exiting')
		if args[0]:
			self.handle_enter_sleep()
		else:
			self.handle_exit_sleep()

	def handle_enter_sleep(self):
		self.log.security('Locking the screen before sleep.')
		if self.daemon.actions.run('lock-screen'):
			# Give the locker a moment to cover the screen.
			time.sleep(self.daemon.config.lock_settle_time)
		# Release the delay lock.
		# This must be done only after the above
		self.sleep_lock.release()

	def handle_exit_sleep(self):
		self.log.security('Woke up from sleep, showing the unlock prompt.')
		self.daemon.actions.run('force-display-on')
		self.daemon.actions.run('deactivate-screen')
		if not self.sleep_lock.acquire():
			self.log.warning('Could not re-take the delay lock; the next sleep will not wait for the screen to lock.')
