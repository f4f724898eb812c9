from setuptools import setup

setup(
	name='xsslogind',
	version='0.1.0',
	description='Locks xscreensaver on suspend and implements screen saver inhibition',
	packages=['xsslogind', 'xsslogind.modules'],
	package_dir={'':'src'},
	python_requires='>=3.10',
	install_requires=[
		'dbus-python',
		'PyGObject',
	],
	extras_require={
		'test': [
			'pytest',
		],
	},
	entry_points={
		'console_scripts': [
			'xsslogind=xsslogind:main',
		]
	}
)
