"""Turning TUF metadata and target files into OCI images and indexes."""