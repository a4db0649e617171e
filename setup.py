from setuptools import setup, find_packages
import re

# Read version from mytaxcalc/__init__.py
with open('mytaxcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='mytaxcalc',
    version=version,
    packages=find_packages(include=['mytaxcalc', 'mytaxcalc.*']),
    package_data={
        'mytaxcalc': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'my-tax=mytaxcalc.cli.__main__:main',
            'my-tax-mcp=mytaxcalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Malaysian personal income tax calculator.',
    python_requires='>=3.10',
)
