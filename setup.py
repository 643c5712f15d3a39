from setuptools import setup, find_namespace_packages

setup(
    name='atmfjstc-celeste-map',
    version='1.0.0',

    author_email='atmfjstc@protonmail.com',

    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src', include=['atmfjstc.*']),

    install_requires=[
        'termcolor>=1, <3',
        'colorama>=0.4.6, <2',
    ],

    entry_points={
        'console_scripts': [
            'celeste-map-info = atmfjstc.lib.celeste_map.cli:main',
        ],
    },

    zip_safe=True,

    description="Decoder for Celeste map files (BinaryPacker format)",

    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Typing :: Typed",
    ],
    python_requires='>=3.8',
)
