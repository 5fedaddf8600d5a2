from setuptools import find_packages, setup

VERSION = "0.1.0"


def readme():
	with open("README.md", "r", encoding="utf-8") as fh:
		return fh.read()


setup(
	name="fileshare",
	version=VERSION,
	description="A static file server that lists directories and serves files as downloads on the local network",
	long_description=readme(),
	long_description_content_type="text/markdown",
	packages=find_packages(where="src/py"),
	package_dir={"": "src/py"},
	classifiers=[
		"Development Status :: 4 - Beta",
		"Intended Audience :: End Users/Desktop",
		"License :: OSI Approved :: MIT License",
		"Operating System :: POSIX",
		"Programming Language :: Python :: 3",
		"Programming Language :: Python :: 3.10",
		"Programming Language :: Python :: 3.11",
		"Programming Language :: Python :: 3.12",
		"Topic :: Internet :: WWW/HTTP :: HTTP Servers",
		"Topic :: Communications :: File Sharing",
	],
	python_requires=">=3.10",
	install_requires=[
		"mypy-extensions",
	],
	extras_require={
		"dev": [
			"mypy",
			"flake8",
			"bandit",
		],
		"test": [
			"pytest",
		],
	},
	entry_points={
		"console_scripts": [
			"fileshare=fileshare.__main__:main",
		],
	},
	include_package_data=True,
	zip_safe=False,
)
