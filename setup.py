from setuptools import setup, find_packages

setup(name='aioetcd2',
      version='0.1.0',
      description='asyncio client for the etcd v2 keys API',
      author='Zeng Ke',
      author_email='zk@bixin.com',
      packages=find_packages(include=['aioetcd2', 'aioetcd2.*']),
      scripts=['bin/etcd2.py'],
      classifiers=[
          'Development Status :: 4 - Beta',
          'Environment :: Console',
          'Intended Audience :: Developers',
          'License :: OSI Approved :: MIT License',
          'Programming Language :: Python :: 3.8',
          'Programming Language :: Python :: 3.9',
          'Programming Language :: Python :: 3 :: Only',
          'Operating System :: POSIX',
          'Framework :: AsyncIO',
      ],

      install_requires=[
          'aiohttp >= 3.9',
          'dnspython >= 2.0',
          'sentry-sdk >= 1.3.1',
      ],
      extras_require={
          'test': [
              'pytest',
              'pytest-asyncio >= 0.17',
          ],
      },
      python_requires='>=3.8',
)
