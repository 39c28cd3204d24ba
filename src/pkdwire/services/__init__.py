"""Service layer: operations over the wire codec returning :class:`ServiceResult`."""
