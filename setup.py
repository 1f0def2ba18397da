from setuptools import find_namespace_packages, setup

# Installation en mode développement :
#   pip install -e .[test]

setup(
    name='admin-console',
    version='1.0',
    description="Console d'administration : menus, rôles et affectations",
    packages=find_namespace_packages(include=['backend', 'backend.*'], exclude=['backend.tests', 'backend.tests.*']),
    python_requires='>=3.10',
    install_requires=[
        'fastapi>=0.110',
        'pydantic>=2.5',
        'uvicorn>=0.27',
    ],
    extras_require={
        'test': ['pytest>=7.4', 'httpx>=0.25'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Framework :: FastAPI',
    ],
)
