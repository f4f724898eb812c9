# xsslogind.modules.dbus - D-Bus connections
# Opens the system bus (used to talk to systemd-logind) and the session
# bus (where applications find our ScreenSaver service), both attached
# to the GLib main context.

import dbus
from dbus.mainloop.glib import DBusGMainLoop

import xsslogind
import xsslogind.module

class BusConnection:
	'''One bus connection, as seen by the event loop.'''

	def __init__(self, name, bus, poller):
		self.name = name
		self.bus = bus
		self.poller = poller
		self.disconnected = False

		# Report a lost connection to the event loop, instead of letting
		# libdbus exit the process.
		bus.set_exit_on_disconnect(False)
		bus.call_on_disconnection(self.handle_disconnect)

	def handle_disconnect(self, _connection):
		self.disconnected = True

	# Dispatch pending work.  Returns True if anything was processed.
	# Note that both connections share one main context, so this may
	# also process messages which arrived on the other connection.
	def process(self):
		if self.disconnected:
			raise xsslogind.TransportError('Lost connection to the %s bus' % (self.name,))
		return self.poller.dispatch()

	# Seconds until this connection needs servicing; None if it has no
	# deadline of its own.
	def get_timeout(self):
		if self.disconnected or self.poller.pending():
			return 0
		return None

	def close(self):
		if not self.disconnected:
			self.bus.close()
			self.disconnected = True

	def __str__(self):
		return '%s bus' % (self.name,)


class DBusModule(xsslogind.module.Module):
	name = 'dbus'

	dependencies = ('glib',)

	def __init__(self, daemon):
		super().__init__(daemon)

		self.dbus_mainloop = None
		self.system_bus = None
		self.session_bus = None

		# [management connection, application-facing connection]
		self.connections = []

	def start(self):
		poller = self.daemon.modules['glib'].poller
		self.dbus_mainloop = DBusGMainLoop()

		try:
			self.system_bus = dbus.SystemBus(mainloop=self.dbus_mainloop)
			self.connections.append(BusConnection('system', self.system_bus, poller))
			self.session_bus = dbus.SessionBus(mainloop=self.dbus_mainloop)
			self.connections.append(BusConnection('session', self.session_bus, poller))
		except dbus.exceptions.DBusException as e:
			self.stop()
			raise xsslogind.TransportError('Failed to connect to D-Bus: %s' % (e.get_dbus_message(),)) from e

		self.log.debug('Connected to the system and session buses.')

	def stop(self):
		for connection in reversed(self.connections):
			connection.close()
		self.connections = []
		self.system_bus = None
		self.session_bus = None
		self.dbus_mainloop = None
