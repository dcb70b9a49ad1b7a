# setup.py
from setuptools import setup, find_packages

with open('requirements.txt') as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith('#')]

setup(
    name='nexttogo_service',
    version='1.0.0',
    packages=find_packages(include=['nexttogo_service', 'nexttogo_service.*']),
    description='Polling service that keeps a fixed-size list of the next races to go.',
    long_description='This package contains the feed engine, the race feed adapters and the FastAPI rendering surface.',
    python_requires='>=3.10',
    install_requires=requirements,
    extras_require={
        'test': [
            'pytest>=8.0',
            'pytest-asyncio>=0.23',
            'respx>=0.21',
            'asgi-lifespan>=2.1',
        ],
    },
    entry_points={
        'console_scripts': [
            'nexttogo-api=nexttogo_service.run_api:main',
        ],
    },
)
