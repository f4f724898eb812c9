"""
Tests for the org.freedesktop.ScreenSaver service object.
"""

import logging
import types

import pytest

dbus = pytest.importorskip('dbus')
pytest.importorskip('dbus.service')

import xsslogind
from xsslogind.inhibitors import InhibitorRegistry
from xsslogind.modules import screensaver


class FakeSessionBus:
	def __init__(self):
		self.exported = []

	def _register_object_path(self, path, *args, **kwargs):
		self.exported.append(path)

	def _unregister_object_path(self, path):
		self.exported.remove(path)


@pytest.fixture
def registry():
	return InhibitorRegistry()


@pytest.fixture
def service(registry):
	return screensaver.ScreenSaverService(registry, logging.getLogger('test'))


def test_end_to_end_scenario(service, registry):
	t1 = service.Inhibit('vlc', 'video', sender=':1.42')
	t2 = service.Inhibit('firefox', 'video', sender=':1.43')
	assert isinstance(t1, dbus.UInt32)
	assert t1 != t2
	assert registry.count == 2

	service.UnInhibit(t1, sender=':1.42')
	assert registry.count == 1
	service.UnInhibit(t1, sender=':1.42')
	assert registry.count == 1
	service.UnInhibit(t2, sender=':1.43')
	assert registry.count == 0


def test_any_caller_may_uninhibit(service, registry):
	cookie = service.Inhibit('vlc', 'video', sender=':1.42')
	service.UnInhibit(cookie, sender=':1.99')
	assert registry.count == 0


def test_uninhibit_unknown_cookie(service, registry):
	service.Inhibit('vlc', 'video')
	assert service.UnInhibit(dbus.UInt32(1234)) is None
	assert registry.count == 1


def test_method_signatures():
	assert screensaver.ScreenSaverService.Inhibit._dbus_in_signature == 'ss'
	assert screensaver.ScreenSaverService.Inhibit._dbus_out_signature == 'u'
	assert screensaver.ScreenSaverService.UnInhibit._dbus_in_signature == 'u'
	assert screensaver.ScreenSaverService.Inhibit._dbus_interface == 'org.freedesktop.ScreenSaver'


def test_module_exports_both_paths(monkeypatch, registry):
	bus = FakeSessionBus()
	names = []
	monkeypatch.setattr(screensaver.dbus.service, 'BusName',
						lambda name, bus, do_not_queue: names.append((name, do_not_queue)) or name)

	daemon = types.SimpleNamespace(
		modules={'dbus': types.SimpleNamespace(session_bus=bus)},
		registry=registry,
	)
	module = screensaver.ScreenSaverModule(daemon)
	module.start()
	assert names == [('org.freedesktop.ScreenSaver', True)]
	assert bus.exported == ['/ScreenSaver', '/org/freedesktop/ScreenSaver']
	assert module.service.registry is registry

	module.stop()
	assert bus.exported == []


def test_failed_export_releases_name(monkeypatch, registry):
	bus = FakeSessionBus()
	def register(path, *args, **kwargs):
		if path == '/org/freedesktop/ScreenSaver':
			raise RuntimeError('object path already in use')
		bus.exported.append(path)
	bus._register_object_path = register
	monkeypatch.setattr(screensaver.dbus.service, 'BusName',
						lambda name, bus, do_not_queue: name)

	daemon = types.SimpleNamespace(
		modules={'dbus': types.SimpleNamespace(session_bus=bus)},
		registry=registry,
	)
	module = screensaver.ScreenSaverModule(daemon)
	with pytest.raises(xsslogind.TransportError, match='already in use'):
		module.start()

	assert bus.exported == []
	assert module.bus_name is None
	assert module.service is None
