"""Creation and management of XFS disk images."""