# xsslogind.modules.screensaver - org.freedesktop.ScreenSaver service
# Lets applications (video players, browsers...) ask for the screen
# saver to stay off.  Callers get a cookie from Inhibit() and hand it
# back to UnInhibit() when done.  While any cookie is active, the event
# loop keeps resetting the screen saver's idle timer.

import dbus
import dbus.service

import xsslogind
import xsslogind.module

SERVICE_NAME = 'org.freedesktop.ScreenSaver'
INTERFACE = 'org.freedesktop.ScreenSaver'

# Different clients use different paths for the same object.
OBJECT_PATHS = ('/ScreenSaver', '/org/freedesktop/ScreenSaver')

class ScreenSaverService(dbus.service.Object):
	SUPPORTS_MULTIPLE_OBJECT_PATHS = True

	def __init__(self, registry, log):
		# Not exported yet; see ScreenSaverModule.start.
		super().__init__()
		self.registry = registry
		self.log = log

	# Note: cookies are not tied to the connection which requested
	# them.  Any client may cancel any inhibitor, and inhibitors of
	# clients which exit without calling UnInhibit stay active.

	@dbus.service.method(INTERFACE, in_signature='ss', out_signature='u', sender_keyword='sender')
	def Inhibit(self, application_name, reason, sender=None):
		self.log.debug('Inhibit(%r, %r) from %s', application_name, reason, sender)
		return dbus.UInt32(self.registry.inhibit(application_name, reason))

	@dbus.service.method(INTERFACE, in_signature='u', out_signature='', sender_keyword='sender')
	def UnInhibit(self, cookie, sender=None):
		self.log.debug('UnInhibit(%d) from %s', cookie, sender)
		self.registry.uninhibit(cookie)


class ScreenSaverModule(xsslogind.module.Module):
	name = 'screensaver'

	dependencies = ('dbus',)

	def __init__(self, daemon):
		super().__init__(daemon)
		self.bus = None
		self.bus_name = None
		self.service = None

	def start(self):
		self.bus = self.daemon.modules['dbus'].session_bus
		try:
			self.bus_name = dbus.service.BusName(SERVICE_NAME, bus=self.bus, do_not_queue=True)
		except dbus.exceptions.DBusException as e:
			raise xsslogind.TransportError('Failed to own %s on the session bus (is another screen saver running?): %s' % (
				SERVICE_NAME, e.get_dbus_message())) from e

		self.service = ScreenSaverService(self.daemon.registry, self.log)
		exported = []
		try:
			for path in OBJECT_PATHS:
				self.service.add_to_connection(self.bus, path)
				exported.append(path)
		except Exception as e:
			# stop() is not called when start() fails, so undo here.
			for path in exported:
				self.service.remove_from_connection(self.bus, path)
			self.service = None
			self.bus_name = None
			self.bus = None
			raise xsslogind.TransportError('Failed to export the %s object: %s' % (SERVICE_NAME, e)) from e
		self.log.debug('Serving %s at %s.', SERVICE_NAME, ', '.join(OBJECT_PATHS))

	def stop(self):
		if self.service is not None:
			for path in OBJECT_PATHS:
				self.service.remove_from_connection(self.bus, path)
			self.service = None
		# Dropping the BusName releases the name.
		self.bus_name = None
		self.bus = None
