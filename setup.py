from setuptools import setup, find_packages
setup(
    name='apple-jwt',
    version='1.0.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    include_package_data=True,
    package_data={
        'apple_jwt': [
            'logging.ini',
        ],
    },
    description='Generate Apple JWT tokens from the command line.',
    python_requires='>=3.9',
    install_requires=[
        'invoke>=2.0.0',
        'pyyaml>=6.0',
        'PyJWT[crypto]>=2.8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'cryptography>=41.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'apple-jwt = apple_jwt.cli:main',
        ],
    },
)
