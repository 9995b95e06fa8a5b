#!/usr/bin/env python3

import os

from setuptools import find_namespace_packages, setup

if __name__ == '__main__':
    setup(
        name='aiomutex',
        version='0.1.0',
        description='A fair async mutex with direct ownership handoff',
        author='Ilya Egorov',
        author_email='0x42005e1f@gmail.com',
        license='ISC',
        python_requires='>=3.8',
        install_requires=[
            'sniffio>=1.3.0',
            'typing-extensions>=4.6.0; python_version<"3.11"',
            'wrapt>=1.16.0',
        ],
        extras_require={
            'test': [
                'anyio>=4.0.0',
                'pytest>=8.0.0',
                'trio>=0.23.0',
            ],
        },
        package_dir={'': 'src'},
        packages=find_namespace_packages(where='src'),
        py_modules=[
            entry.name[:-3]
            for entry in os.scandir('src')
            if (
                not entry.name.startswith('.')
                and entry.name.endswith('.py')
                and entry.is_file()
            )
        ]
    )
