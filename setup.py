from setuptools import setup, find_packages
import re

# Read version from settlecalc/__init__.py
with open('settlecalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='settle-calc',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'settlecalc': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
        'python-dateutil>=2.8',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'settle-calc=settlecalc.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Payroll, termination and revenue tax settlement calculations.',
    python_requires='>=3.10',
)
