# xsslogind.inhibitors - screen saver inhibitor bookkeeping
# Tracks the cookies handed out by the ScreenSaver service.  While at
# least one cookie is active, the daemon keeps resetting the screen
# saver's idle timer.

import collections
import os
import random
import time

from xsslogind.logging import log

# Details of an active inhibitor, kept for log messages only.
Inhibitor = collections.namedtuple('Inhibitor', ['application_name', 'reason'])

class CookieSource:
	'''Produces unpredictable 32-bit cookies.

	Reads from the OS entropy source; if that is unavailable, falls back
	to a pseudo-random generator seeded from the clock and PID.'''

	def __init__(self, urandom=os.urandom):
		self.urandom = urandom
		self.fallback = None

	def next(self):
		if self.fallback is None:
			try:
				return int.from_bytes(self.urandom(4), 'little')
			except (NotImplementedError, OSError) as e:
				log.warning('Entropy source unavailable (%s), using pseudo-random cookies.', e)
				self.fallback = random.Random(time.time_ns() ^ os.getpid())
		return self.fallback.getrandbits(32)


class InhibitorRegistry:
	def __init__(self, cookie_source=None):
		self.cookie_source = cookie_source or CookieSource()
		self.log = log.getChild('inhibitors')

		# Map from cookie to Inhibitor.
		self.inhibitors = {}

	@property
	def count(self):
		return len(self.inhibitors)

	@property
	def is_inhibited(self):
		return bool(self.inhibitors)

	def new_cookie(self):
		# Zero is reserved, and cookies must not collide with one which
		# is still in use.
		while True:
			cookie = self.cookie_source.next()
			if cookie != 0 and cookie not in self.inhibitors:
				return cookie

	def inhibit(self, application_name, reason):
		cookie = self.new_cookie()
		self.inhibitors[cookie] = Inhibitor(str(application_name), str(reason))
		self.log.info('Inhibited by %r (%s), cookie %d; %d active.',
					  application_name, reason, cookie, self.count)
		return cookie

	def uninhibit(self, cookie):
		'''Remove an inhibitor.  Returns False if the cookie was unknown.'''
		inhibitor = self.inhibitors.pop(int(cookie), None)
		if inhibitor is None:
			self.log.warning('Ignoring uninhibit for unknown cookie %d.', cookie)
			return False
		self.log.info('Uninhibited by %r, cookie %d; %d active.',
					  inhibitor.application_name, cookie, self.count)
		return True

	def describe(self):
		return ['%d: %s (%s)' % (cookie, inhibitor.application_name, inhibitor.reason)
				for cookie, inhibitor in self.inhibitors.items()]
