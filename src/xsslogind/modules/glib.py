# xsslogind.modules.glib - GLib main context integration
# Both D-Bus connections are attached to the default GLib main context.
# The daemon's event loop blocks on that context (which polls both bus
# sockets) instead of running a GLib MainLoop, so that it stays in
# control of the wait timeout.

import math
import signal

from gi.repository import GLib

import xsslogind.module

class MainContextPoller:
	def __init__(self):
		# Note: dbus-python always attaches connections to the default
		# context, so that is the one we have to poll.
		self.context = GLib.MainContext.default()

	def pending(self):
		return self.context.pending()

	def dispatch(self):
		'''Dispatch one batch of ready sources, without blocking.
		Returns True if anything was dispatched.'''
		return self.context.iteration(False)

	# Block until one of the context's sources (a bus socket, a signal)
	# becomes ready, or until `timeout` seconds have passed.
	def wait(self, timeout):
		if timeout <= 0 or self.context.pending():
			return

		expired = []
		def on_timeout():
			expired.append(True)
			return GLib.SOURCE_REMOVE

		# Round up, so that we never wake up slightly before the deadline.
		source_id = GLib.timeout_add(math.ceil(timeout * 1000), on_timeout)
		try:
			self.context.iteration(True)
		finally:
			if not expired:
				GLib.source_remove(source_id)


class GLibModule(xsslogind.module.Module):
	name = 'glib'

	STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)

	def __init__(self, daemon):
		super().__init__(daemon)
		self.poller = None
		self.signal_sources = []

	def start(self):
		self.poller = MainContextPoller()

		# Stop gracefully when receiving a SIGINT/SIGTERM.  Going through
		# GLib makes the signal wake up a blocked wait().
		for signum in self.STOP_SIGNALS:
			self.signal_sources.append(GLib.unix_signal_add(
				GLib.PRIORITY_HIGH,
				signum,
				self.handle_stop_signal,
				signum,
			))

	def stop(self):
		for source_id in self.signal_sources:
			GLib.source_remove(source_id)
		self.signal_sources = []
		self.poller = None

	def handle_stop_signal(self, signum):
		self.log.info('Got signal %r - requesting quit.', signal.strsignal(signum))
		self.daemon.stop()
		return GLib.SOURCE_CONTINUE
