from setuptools import setup, find_packages

setup(
    name='narrsync',
    version='1.0.0',
    packages=find_packages(include=['narrsync', 'narrsync.*']),
    include_package_data=True,
    python_requires='>=3.12',
    install_requires=[
        'colored>=2.2.3',
        'halo>=0.0.31',
        'python-dotenv>=1.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.4',
        ],
    },
    entry_points='''
        [console_scripts]
        narrsync=narrsync.__main__:main
    ''',
    license='MIT',
    keywords='transcript synchronization character expressions timeline',
    description='Synchronizes transcript segments, character expressions, and contextual images to a playback clock',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
