from setuptools import find_packages, setup

setup(
    name='device-faker-templates',
    version='0.1.0',
    description='Discover and download online Device Faker configuration templates',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.11',
    install_requires=[
        'aiohttp',
        'PyYAML',
        'platformdirs',
        'rich',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
            'pytest-mock',
        ],
    },
    entry_points={
        'console_scripts': [
            'device-faker-templates=device_faker_templates.cli:main',
        ],
    },
)
