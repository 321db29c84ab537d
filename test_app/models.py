from django.contrib.auth import get_user_model
from django.db import models

from rail_acl.hooks import AclManager

User = get_user_model()


class Department(models.Model):
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=20, blank=True)

    class Meta:
        app_label = "test_app"


class Employee(models.Model):
    name = models.CharField(max_length=100)
    email = models.EmailField(blank=True)
    salary = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    notes = models.TextField(blank=True)
    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
    )
    owner = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee_records",
    )

    objects = AclManager()

    class Meta:
        app_label = "test_app"

    @property
    def display_name(self):
        return f"{self.name} <{self.email}>"
