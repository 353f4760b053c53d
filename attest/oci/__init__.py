"""OCI image specs, platforms, references, package URLs and in-memory images."""