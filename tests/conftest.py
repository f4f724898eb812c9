"""
Pytest configuration and fixtures.
"""

import os
import sys
from pathlib import Path

import pytest

# Allow running the tests from a source checkout
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import xsslogind
import xsslogind.config


class FakeActions:
	"""Records action invocations instead of running programs."""

	def __init__(self, events):
		self.events = events
		self.results = {}

	@property
	def calls(self):
		return [name for kind, name in self.events if kind == 'action']

	def run(self, name):
		self.events.append(('action', name))
		return self.results.get(name, True)


class FakeUnixFd:
	def __init__(self, fd):
		self.fd = fd

	def take(self):
		return self.fd


class FakeLogind:
	"""Stands in for the org.freedesktop.login1 manager object."""

	def __init__(self, events):
		self.events = events
		self.error = None
		self.handle = None
		self.calls = []
		self.fds = []

	def Inhibit(self, what, who, why, mode, dbus_interface=None):
		self.calls.append((what, who, why, mode, dbus_interface))
		self.events.append(('inhibit', what))
		if self.error is not None:
			raise self.error
		if self.handle is not None:
			return self.handle
		r, w = os.pipe()
		os.close(w)
		self.fds.append(r)
		return FakeUnixFd(r)


class FakeBus:
	def __init__(self, events):
		self.logind = FakeLogind(events)
		self.receivers = []

	def get_object(self, bus_name, object_path):
		assert bus_name == 'org.freedesktop.login1'
		assert object_path == '/org/freedesktop/login1'
		return self.logind

	def add_signal_receiver(self, handler, **kwargs):
		self.receivers.append((handler, kwargs))

	def remove_signal_receiver(self, handler, **kwargs):
		self.receivers = [(h, k) for (h, k) in self.receivers if h != handler]


def is_open(fd):
	try:
		os.fstat(fd)
		return True
	except OSError:
		return False


@pytest.fixture
def events():
	"""Ordered log of everything the fakes were asked to do."""
	return []


@pytest.fixture
def actions(events):
	return FakeActions(events)


@pytest.fixture
def bus(events):
	fake_bus = FakeBus(events)
	yield fake_bus
	for fd in fake_bus.logind.fds:
		if is_open(fd):
			os.close(fd)


@pytest.fixture
def config():
	return xsslogind.config.Config(environ={})
