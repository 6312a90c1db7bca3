"""
Setup script for packaging Student Portal.

Usage:
    pip install -e .[test]

The ``student-portal`` command starts the web server.
"""
from setuptools import setup, find_namespace_packages

setup(
    name='student-portal',
    version='1.0.0',
    description='Mock student registration, login and profile dashboard',
    packages=find_namespace_packages(include=['src', 'src.*']),
    python_requires='>=3.8',
    install_requires=[
        'fastapi',
        'uvicorn',
        'pydantic',
        'python-multipart',
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
    entry_points={
        'console_scripts': [
            'student-portal=src.interface.portal.server:main',
        ],
    },
)
