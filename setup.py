from setuptools import setup, find_packages

setup(
    name='verstamp',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    version='0.1.0',
    description='Updates the version tags of a project file directly on a GitHub branch',
    keywords=['release', 'automation', 'versioning', 'github', 'csproj'],
    classifiers=['Development Status :: 3 - Alpha',
                 'Intended Audience :: Developers',
                 'Topic :: Software Development :: Build Tools',
                 'Programming Language :: Python :: 3'],
    python_requires='>=3.10',
    install_requires=['requests', 'docopt', 'rich', 'blinker'],
    extras_require={
        'test': ['pytest', 'pytest-httpserver'],
    },
    entry_points={
        "console_scripts": ['verstamp = verstamp.verstamp:run_verstamp']
    }
)
