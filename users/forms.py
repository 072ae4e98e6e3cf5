from django import forms

from users.services.auth import MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH


class LoginForm(forms.Form):
    email = forms.EmailField(label="Email")
    password = forms.CharField(label="Password", widget=forms.PasswordInput)


class RegisterForm(forms.Form):
    name = forms.CharField(label="Name", min_length=MIN_NAME_LENGTH, max_length=150)
    email = forms.EmailField(label="Email")
    password = forms.CharField(
        label="Password",
        min_length=MIN_PASSWORD_LENGTH,
        widget=forms.PasswordInput,
    )

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if len(name) < MIN_NAME_LENGTH:
            raise forms.ValidationError("Name must be at least 2 characters")
        return name

    def clean_email(self):
        return (self.cleaned_data.get("email") or "").strip().lower()
