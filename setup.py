import os

from setuptools import setup, find_packages

__version__ = "1.0"

tests_require = ['pytest', 'mypy', 'pycodestyle', 'types-setuptools']

extras_require = {
    'test': tests_require,
    'doc': ['sphinx', 'sphinx_rtd_theme'],
}


def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


setup(
    name='python-s7session',
    version=__version__,
    description='PDU size guard, response validation and frame capture for S7 PLC sessions',
    packages=find_packages(include=['s7session', 's7session.*']),
    package_data={'s7session': ['py.typed']},
    license='MIT',
    long_description=read('README.rst'),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Topic :: System :: Hardware",
        "Intended Audience :: Developers",
        "Intended Audience :: Manufacturing",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires='>=3.9',
    extras_require=extras_require,
    tests_require=tests_require,
    test_suite="tests",
)
